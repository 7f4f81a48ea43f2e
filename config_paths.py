import json
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "tabula")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
STATE_PATH = os.path.join(CONFIG_DIR, "state.json")

# default settings
PAGE_SIZE_DEFAULT = 10
LOG_LEVEL_DEFAULT = "WARNING"
JSON_LOGS_DEFAULT = False


def ensure_config_dirs():
    try:
        os.makedirs(CONFIG_DIR, exist_ok=True)
    except OSError:
        pass


def load_config():
    cfg = {
        "PAGE_SIZE": PAGE_SIZE_DEFAULT,
        "STATE_PATH": STATE_PATH,
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
        "JSON_LOGS": JSON_LOGS_DEFAULT,
    }

    if os.path.exists(CONFIG_JSON):
        try:
            with open(CONFIG_JSON, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            data = None
        if isinstance(data, dict):
            page_size = data.get("page_size")
            if isinstance(page_size, int) and not isinstance(page_size, bool) and page_size > 0:
                cfg["PAGE_SIZE"] = page_size
            state_path = data.get("state_path")
            if isinstance(state_path, str) and state_path.strip():
                cfg["STATE_PATH"] = os.path.expanduser(state_path)
            level = data.get("log_level")
            if isinstance(level, str) and level.strip():
                cfg["LOG_LEVEL"] = level.strip().upper()
            json_logs = data.get("json_logs")
            if isinstance(json_logs, bool):
                cfg["JSON_LOGS"] = json_logs

    env_json = os.environ.get("TABULA_JSON_LOGS")
    if env_json is not None:
        cfg["JSON_LOGS"] = env_json.lower() in ("1", "true", "yes")

    return cfg
