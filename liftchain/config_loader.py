import copy
import os

from liftchain import constants
from liftchain.exceptions import ConfigurationError
from liftchain.util import load_yml_conf, recursive_update


class ConfigLoader:
    def __init__(self, conf_path=None):
        if conf_path is None:
            conf_path = os.environ.get(constants.conf_path_env_key)
        self.conf_path = conf_path
        self._default = {}
        self._user = {}
        self._all = {}
        self._load_default_conf(build_all=False)
        self._load_user_conf(build_all=False)
        self._build_all()

    def _load_default_conf(self, build_all=True):
        self._default = load_yml_conf(constants.default_conf_path)
        if self._default.get(constants.log_every_key) is None:
            self._default[constants.log_every_key] = constants.default_log_every
        if self._default.get(constants.log_level_key) is None:
            self._default[constants.log_level_key] = constants.default_log_level
        if self._default.get(constants.chains_key) is None:
            self._default[constants.chains_key] = {}
        if build_all:
            self._build_all()

    def _load_user_conf(self, build_all=True):
        self._user = {}
        if self.conf_path:
            if os.path.exists(self.conf_path):
                self._user = load_yml_conf(self.conf_path)
            else:
                raise ConfigurationError(
                    "Conf file {} does not exist.".format(self.conf_path)
                )
        if build_all:
            self._build_all()

    def _build_all(self):
        self._all = recursive_update(self._default, self._user)
        log_every = self._all.get(constants.log_every_key)
        if not isinstance(log_every, int) or log_every <= 0:
            raise ConfigurationError(
                "{} must be a positive integer, not {!r}".format(
                    constants.log_every_key, log_every
                )
            )

    def has_key(self, key):
        present = key in self._all
        return present

    def get_val(self, key):
        if key in self._all:
            val = self._all[key]
        else:
            val = None
        return val

    def get_all_conf(self):
        return copy.deepcopy(self._all)

    def override_all_conf(self, conf):
        self._all = recursive_update(self._all, conf)

    def chain_path(self, from_db, to_db):
        """
        Find the chain file converting from_db coordinates to to_db.
        An explicit entry under "chains" wins. Otherwise chains_dir is
        searched for <from_db>To<To_db>.over.chain.gz, then .over.chain.
        """
        to_db = to_db[0].upper() + to_db[1:]
        name = "{}To{}".format(from_db, to_db)
        chains = self._all.get(constants.chains_key) or {}
        if name in chains:
            path = chains[name]
            if not os.path.exists(path):
                raise ConfigurationError(
                    "Chain file for {} does not exist: {}".format(name, path)
                )
            return path
        chains_dir = self._all.get(constants.chains_dir_key)
        if chains_dir:
            for suffix in constants.chain_file_suffixes:
                path = os.path.join(chains_dir, name + suffix)
                if os.path.isfile(path):
                    return path
        raise ConfigurationError("No chain file found for {}".format(name))
