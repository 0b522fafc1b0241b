import os

# Directories
packagedir = os.path.dirname(os.path.abspath(__file__))

# conf
default_conf_fname = "liftchain.yml"
default_conf_path = os.path.join(packagedir, default_conf_fname)
conf_path_env_key = "LIFTCHAIN_CONF"

# logging
log_every_key = "log_every"
default_log_every = 10000
log_level_key = "log_level"
default_log_level = "INFO"
log_format = "%(asctime)s %(name)-20s %(levelname)s %(message)s"
error_log_format = "SOURCE:%(name)-20s %(message)s"

# chain files
chain_header_token = "chain"
chains_key = "chains"
chains_dir_key = "chains_dir"
chain_file_suffixes = [".over.chain.gz", ".over.chain"]

# lift output
unmapped_mark = "."
