from .settings import BlockSettings, ChartsSettings, Settings, load_settings

__all__ = ["BlockSettings", "ChartsSettings", "Settings", "load_settings"]
