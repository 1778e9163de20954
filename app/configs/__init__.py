from app.configs.settings import (
    CONFIG_MAP,
    DEFAULT_ERROR_MESSAGE,
    LimiterConfig,
    PasswordConfig,
    Settings,
    settings,
)

__all__ = [
    "CONFIG_MAP",
    "DEFAULT_ERROR_MESSAGE",
    "LimiterConfig",
    "PasswordConfig",
    "Settings",
    "settings",
]
