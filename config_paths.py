import json
import logging
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "gridkit")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")

# default settings
LOG_LEVEL_DEFAULT = "WARNING"
DEFAULT_AGGREGATE_MODE_DEFAULT = "sum"
PURGE_DELETED_COLUMN_DATA_DEFAULT = False

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_AGGREGATE_MODES = {"sum", "average", "median"}
_LOGGER_NAMES = (
    "table_mutations",
    "table_editor",
)


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)


def load_config():
    cfg = {
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
        "DEFAULT_AGGREGATE_MODE": DEFAULT_AGGREGATE_MODE_DEFAULT,
        "PURGE_DELETED_COLUMN_DATA": PURGE_DELETED_COLUMN_DATA_DEFAULT,
    }

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return cfg

    if not isinstance(data, dict):
        return cfg

    level = data.get("log_level")
    if isinstance(level, str) and level.strip().upper() in _LOG_LEVELS:
        cfg["LOG_LEVEL"] = level.strip().upper()

    mode = data.get("default_aggregate_mode")
    if isinstance(mode, str) and mode.strip().lower() in _AGGREGATE_MODES:
        cfg["DEFAULT_AGGREGATE_MODE"] = mode.strip().lower()

    purge = data.get("purge_deleted_column_data")
    if isinstance(purge, bool):
        cfg["PURGE_DELETED_COLUMN_DATA"] = purge

    return cfg


def configure_logging(cfg):
    level = getattr(logging, cfg.get("LOG_LEVEL", LOG_LEVEL_DEFAULT), logging.WARNING)
    logging.basicConfig(format="%(asctime)s %(name)s %(levelname)s %(message)s")
    for name in _LOGGER_NAMES:
        logging.getLogger(name).setLevel(level)
