from env.env import (
    Environment,
    get_env,
    reset_env_caches,
    get_logging_env,
    ConfigError,
    _load_dotenv,
)

from env.paths import PROJECT_ROOT, CONFIG_DIR, LOGS_DIR

__all__ = [
    "Environment",
    "get_env",
    "reset_env_caches",
    "get_logging_env",
    "ConfigError",
    "LOGS_DIR",
    "PROJECT_ROOT",
    "CONFIG_DIR",
    "_load_dotenv",
]
