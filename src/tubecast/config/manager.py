"""Configuration manager for loading and saving Tubecast config."""

import logging
from pathlib import Path

import yaml

from tubecast.config.schema import ChannelConfig, Channels, GlobalConfig
from tubecast.utils.errors import (
    ChannelNotFoundError,
    DuplicateChannelError,
    InvalidConfigError,
)
from tubecast.utils.paths import get_channels_file, get_config_dir, get_config_file

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages Tubecast configuration files."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the config manager.

        Args:
            config_dir: Optional custom config directory. Defaults to XDG config dir.
        """
        if config_dir is None:
            self.config_dir = get_config_dir()
            self.config_file = get_config_file()
            self.channels_file = get_channels_file()
        else:
            self.config_dir = config_dir
            self.config_file = config_dir / "config.yaml"
            self.channels_file = config_dir / "channels.yaml"

    def load_config(self) -> GlobalConfig:
        """Load and validate global configuration.

        Returns:
            Validated GlobalConfig instance

        Raises:
            InvalidConfigError: If config is invalid
        """
        if not self.config_file.exists():
            config = GlobalConfig()
            self.save_config(config)
            logger.debug(f"Created default config at {self.config_file}")
            return config

        try:
            with open(self.config_file) as f:
                data = yaml.safe_load(f) or {}
            return GlobalConfig(**data)
        except Exception as e:
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: {e}"
            ) from e

    def save_config(self, config: GlobalConfig) -> None:
        """Save global configuration.

        Args:
            config: GlobalConfig instance to save
        """
        data = config.model_dump(mode="json")

        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    def load_channels(self) -> Channels:
        """Load channels configuration.

        Raises:
            InvalidConfigError: If channels file is invalid
        """
        if not self.channels_file.exists():
            channels = Channels()
            self.save_channels(channels)
            return channels

        try:
            with open(self.channels_file) as f:
                data = yaml.safe_load(f) or {}
            return Channels(**data)
        except Exception as e:
            raise InvalidConfigError(
                f"Invalid channels configuration in {self.channels_file}: {e}"
            ) from e

    def save_channels(self, channels: Channels) -> None:
        """Save channels configuration.

        Args:
            channels: Channels instance to save
        """
        # mode="json" turns URLs into plain strings
        data = channels.model_dump(mode="json")

        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.channels_file, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    def add_channel(self, name: str, channel: ChannelConfig) -> None:
        """Add a channel.

        Args:
            name: Feed name (also the feed file's base name)
            channel: Channel configuration

        Raises:
            DuplicateChannelError: If channel already exists (use update instead)
        """
        channels = self.load_channels()

        if name in channels.channels:
            raise DuplicateChannelError(
                f"Channel '{name}' already exists. Use update to modify it."
            )

        channels.channels[name] = channel
        self.save_channels(channels)

    def update_channel(self, name: str, channel: ChannelConfig) -> None:
        """Update an existing channel.

        Raises:
            ChannelNotFoundError: If channel doesn't exist
        """
        channels = self.load_channels()

        if name not in channels.channels:
            raise ChannelNotFoundError(f"Channel '{name}' not found")

        channels.channels[name] = channel
        self.save_channels(channels)

    def remove_channel(self, name: str) -> None:
        """Remove a channel. The feed file itself is left in place.

        Raises:
            ChannelNotFoundError: If channel doesn't exist
        """
        channels = self.load_channels()

        if name not in channels.channels:
            raise ChannelNotFoundError(f"Channel '{name}' not found")

        del channels.channels[name]
        self.save_channels(channels)

    def get_channel(self, name: str) -> ChannelConfig:
        """Get a single channel configuration.

        Raises:
            ChannelNotFoundError: If channel doesn't exist
        """
        channels = self.load_channels()

        if name not in channels.channels:
            raise ChannelNotFoundError(f"Channel '{name}' not found")

        return channels.channels[name]

    def list_channels(self) -> dict[str, ChannelConfig]:
        """List all channels.

        Returns:
            Dictionary of feed name to ChannelConfig
        """
        return self.load_channels().channels
