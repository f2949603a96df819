from .settings import LOG_FORMAT, Settings, configure_logging, get_settings

__all__ = [
    "LOG_FORMAT",
    "Settings",
    "configure_logging",
    "get_settings",
]
