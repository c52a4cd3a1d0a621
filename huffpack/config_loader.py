# config_loader.py
import logging
import os

import yaml
from dotenv import load_dotenv

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config.yaml")

# environment variable -> (section, key, type)
ENV_OVERRIDES = {
    "HUFFPACK_BUFFER_SIZE": ("codec", "buffer_size", int),
    "HUFFPACK_DEGENERATE_POLICY": ("codec", "degenerate_policy", str),
    "HUFFPACK_LOG_LEVEL": ("logging", "level", str),
}


def load_config(config_path=None):
    """
    Loads the YAML configuration, then applies environment overrides.

    Parameters:
    config_path (str): Path of the YAML file. Falls back to $HUFFPACK_CONFIG,
        then to the config.yaml shipped with the package.

    Returns:
    dict: The configuration, with 'codec', 'logging' and 'server' sections.
    """
    load_dotenv()
    config_path = config_path or os.getenv("HUFFPACK_CONFIG") or DEFAULT_CONFIG_PATH
    with open(config_path, "r") as f:
        config = yaml.safe_load(f)
    config = _normalize_sections({} if config is None else config)

    for name, (section, key, cast) in ENV_OVERRIDES.items():
        value = os.getenv(name)
        if value:
            config[section][key] = cast(value)

    validate_config(config)
    return config


def _normalize_sections(config):
    if not isinstance(config, dict):
        raise ValueError(f"Configuration must be a mapping, got {type(config).__name__}")
    for section in ("codec", "logging", "server"):
        if config.get(section) is None:
            config[section] = {}
        elif not isinstance(config[section], dict):
            raise ValueError(f"Configuration section '{section}' must be a mapping")
    return config


def validate_config(config):
    _normalize_sections(config)
    codec = config["codec"]
    codec.setdefault("buffer_size", 0x20000)
    codec.setdefault("degenerate_policy", "one-bit")
    if not isinstance(codec["buffer_size"], int) or codec["buffer_size"] <= 0:
        raise ValueError(f"codec.buffer_size must be a positive integer, got {codec['buffer_size']!r}")
    if codec["degenerate_policy"] not in ("one-bit", "reject"):
        raise ValueError(f"Unsupported codec.degenerate_policy: {codec['degenerate_policy']!r}")

    log = config["logging"]
    log.setdefault("level", "INFO")
    log.setdefault("format", "%(asctime)s %(levelname)s %(name)s: %(message)s")

    server = config["server"]
    server.setdefault("host", "0.0.0.0")
    server.setdefault("port", 4000)
    server.setdefault("max_content_length", 64 * 1024 * 1024)
    return config


def configure_logging(config):
    log = config["logging"]
    logging.basicConfig(level=str(log["level"]).upper(), format=log["format"])
