import os
from pathlib import Path
from typing import Optional

import yaml

# GitHub's reviewThreads connection caps `first` at 100.
MAX_PAGE_SIZE = 100

FORMATS = ("plain", "pretty", "json")

DEFAULT_CONFIG: dict = {
    "format": "pretty",
    "page_size": MAX_PAGE_SIZE,
    "truncate": 80,  # characters of the first body line shown in pretty output
    "color": True,
    "include_conversation": False,  # merge top-level PR comments into `comments`
}


def load_config(config_path: str = ".prreview.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prreview.yml in the current directory
      3. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    if config["format"] not in FORMATS:
        raise ValueError(f"Unknown output format {config['format']!r}. Choose one of: {', '.join(FORMATS)}.")

    # Never ask GitHub for more than one connection page allows.
    config["page_size"] = max(1, min(_as_int("page_size", config["page_size"]), MAX_PAGE_SIZE))

    config["truncate"] = _as_int("truncate", config["truncate"])
    if config["truncate"] < 1:
        raise ValueError(f"truncate must be a positive number of characters, got {config['truncate']}.")

    config["color"] = _as_bool("color", config["color"])
    config["include_conversation"] = _as_bool("include_conversation", config["include_conversation"])

    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config


_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


def _as_int(key: str, value) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}.")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be an integer, got {value!r}.")


def _as_bool(key: str, value) -> bool:
    # Quoted YAML values ("false") arrive as strings.
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"{key} must be true or false, got {value!r}.")
