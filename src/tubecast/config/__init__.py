"""Configuration management for Tubecast."""

from tubecast.config.manager import ConfigManager
from tubecast.config.schema import ChannelConfig, Channels, GlobalConfig, SourceConfig

__all__ = ["ChannelConfig", "Channels", "ConfigManager", "GlobalConfig", "SourceConfig"]
