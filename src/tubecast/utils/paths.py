"""Default locations for Tubecast configuration and feeds."""

from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME = "tubecast"


def get_config_dir() -> Path:
    """Configuration directory (``$XDG_CONFIG_HOME/tubecast`` on Linux)."""
    return Path(user_config_dir(APP_NAME))


def get_config_file() -> Path:
    return get_config_dir() / "config.yaml"


def get_channels_file() -> Path:
    return get_config_dir() / "channels.yaml"


def get_default_feeds_dir() -> Path:
    """Directory feed documents are written to unless configured otherwise."""
    return Path(user_data_dir(APP_NAME)) / "feeds"
