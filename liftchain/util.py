import copy
import gzip
import logging

import oyaml as yaml
from chardet.universaldetector import UniversalDetector


def detect_encoding(path, max_lines=100):
    """
    Guess the text encoding of a plain or gzipped file from its first lines.
    Plain ascii is reported as utf-8, which it is a subset of.
    """
    opener = gzip.open if path.endswith(".gz") else open
    detector = UniversalDetector()
    with opener(path, "rb") as f:
        for n, line in enumerate(f):
            if n >= max_lines or detector.done:
                break
            detector.feed(line)
    detector.close()
    encoding = detector.result.get("encoding")
    if encoding is None or encoding.lower() == "ascii":
        return "utf-8"
    return encoding


def open_input_file(input_path):
    input_path = str(input_path)
    encoding = detect_encoding(input_path)
    if input_path.endswith(".gz"):
        return gzip.open(input_path, mode="rt", encoding=encoding)
    return open(input_path, encoding=encoding)


def load_yml_conf(yml_conf_path):
    """Load a .yml file into a dict; an empty file gives an empty dict."""
    with open(yml_conf_path, encoding="utf-8") as f:
        conf = yaml.safe_load(f)
    return conf if conf is not None else {}


def recursive_update(base, override):
    """
    Return a deep copy of base with override merged into it. Nested dicts are
    merged key by key; any other value in override replaces the one in base.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            merged[key] = recursive_update(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def write_log_msg(logger, e):
    if hasattr(e, "notraceback") and e.notraceback:
        logger.error(e)
    else:
        logger.error("%s: %s", type(e).__name__, e)


def get_level(name):
    level = logging.getLevelName(str(name).upper())
    if not isinstance(level, int):
        raise ValueError("Unknown log level: %s" % name)
    return level
