"""Configuration management for the conversation bridge."""

from .loader import BridgeLoader, load_settings
from .schema import BridgeSettings, CloudConfig, LangGraphConfig, RunConfig

__all__ = ["BridgeLoader", "BridgeSettings", "CloudConfig", "LangGraphConfig", "RunConfig", "load_settings"]
