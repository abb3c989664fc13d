import copy
import os
import yaml

DEFAULT_CONFIG = {
    "logging_level": "INFO",
    "log_dir": "~/.wallpaperviewer",
    "min_file_size": 50 * 1024,  # bytes; smaller files are never decoded
    "notification_timeout": 3000,  # ms
    # native | case_insensitive | case_sensitive
    "path_matching": "native",
    # Per-kind directory overrides; empty string means the OS default location.
    "folders": {
        "user_assets": "",
        "lock_screen": "",
        "spotlight": "",
    },
    "view": {
        "grid_mode": True,
        "orientation_filter": 0,
        "resolution_filter": 0,
        "folder_visibility_mask": 0,  # 0 = never configured
    },
    "quick_save_path": "",
    "gui": {
        "background_color": "#282828",
        "thumbnail_width": 100,
        "thumbnail_height": 60,
        "statusbar_font": "Segoe UI",
        "statusbar_font_size": 9,
    },
}


def _default_config_path() -> str:
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return os.path.join(xdg_config_home, "wallpaperviewer", "config.yaml")


def _deep_merge(base: dict, override: dict) -> dict:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class ConfigManager:
    def __init__(self, config_path: str | None = None):
        self.config_path = config_path or _default_config_path()
        self.config = self.load_config()

    def load_config(self):
        try:
            with open(self.config_path, "r") as f:
                user_config = yaml.safe_load(f) or {}
        except FileNotFoundError:
            config = copy.deepcopy(DEFAULT_CONFIG)
            self.save_config(config)
            return config
        except yaml.YAMLError as exc:
            raise ValueError(f"Malformed config at {self.config_path}") from exc
        if not isinstance(user_config, dict):
            raise ValueError(f"Malformed config at {self.config_path}: expected a mapping")
        return _deep_merge(copy.deepcopy(DEFAULT_CONFIG), user_config)

    def save_config(self, config=None):
        config = self.config if config is None else config
        os.makedirs(os.path.dirname(self.config_path), exist_ok=True)
        with open(self.config_path, "w") as f:
            yaml.safe_dump(config, f, default_flow_style=False)

    def get(self, key, default=None):
        keys = key.split('.')
        value = self.config
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default
        return value if value is not None else default

    def set(self, key, value, save: bool = True):
        keys = key.split('.')
        node = self.config
        for k in keys[:-1]:
            node = node.setdefault(k, {})
        node[keys[-1]] = value
        if save:
            self.save_config(self.config)

    @property
    def logging_level(self):
        return self.get("logging_level", "INFO")
