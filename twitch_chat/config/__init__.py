"""Session configuration: model, provider, loading and hot reload."""

from .loader import load_session_config  # noqa: F401
from .model import SessionConfig, normalize_oauth_token  # noqa: F401
from .provider import ConfigProvider  # noqa: F401
from .watcher import ConfigWatcher, create_config_watcher  # noqa: F401

__all__ = [
    "ConfigProvider",
    "ConfigWatcher",
    "SessionConfig",
    "create_config_watcher",
    "load_session_config",
    "normalize_oauth_token",
]
