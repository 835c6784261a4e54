"""
Constants for the GTD agent.

Note: These constants serve as default fallback values.
Actual values are resolved at runtime via ConfigManager, which checks
environment variables first and <data_dir>/config.json second.
"""
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

# =============================================================================
# Default Fallback Values
# =============================================================================

DEFAULT_DATA_DIR = ".gtd"
DATA_DIR_ENV_VAR = "GTD_DATA_DIR"
SCHEMA_VERSION = "1"

# Status constants (not configurable)
TASK_STATUSES = ["inbox", "next-action", "scheduled", "someday", "completed", "reference"]
COMPLETED_STATUS = "completed"
PRIORITIES = ["low", "medium", "high"]
ADVICE_TYPES = ["organization", "scheduling", "what-to-do-now", "implementation"]

# Seeded on first run when no contexts exist
DEFAULT_CONTEXTS = [
    {"id": "ctx-home", "name": "@home", "icon": "home"},
    {"id": "ctx-office", "name": "@office", "icon": "briefcase"},
    {"id": "ctx-computer", "name": "@computer", "icon": "laptop"},
    {"id": "ctx-phone", "name": "@phone", "icon": "phone"},
    {"id": "ctx-errands", "name": "@errands", "icon": "map-pin"},
    {"id": "ctx-waiting", "name": "@waiting", "icon": "clock"},
]

# AI backend defaults
DEFAULT_AI_PROVIDER = "qwen"
AI_PROVIDERS = ["qwen", "zhipu", "openai"]
DEFAULT_AI_TIMEOUT = 60
AI_TEMPERATURE = 0.7
AI_MAX_TOKENS = 2000
AI_ERROR_BODY_LIMIT = 500
AI_CHAT_TASK_LIMIT = 10

# Date format defaults for CLI input
DEFAULT_DATE_FORMATS = [
    "%Y-%m-%d",      # YYYY-MM-DD (ISO 8601)
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d",      # YYYY/MM/DD
    "%d/%m/%Y",      # DD/MM/YYYY
    "%d %B %Y",      # DD Month YYYY (e.g., 31 December 2024)
    "%d %b %Y",      # DD Mon YYYY (e.g., 31 Dec 2024)
    "%B %d, %Y",     # Month DD, YYYY (e.g., December 31, 2024)
]
DATE_FORMAT_ERROR = (
    "Invalid date format. Supported formats: YYYY-MM-DD, YYYY-MM-DD HH:MM, "
    "YYYY/MM/DD, DD/MM/YYYY, 'DD Month YYYY', 'Month DD, YYYY'. "
    "Examples: 2024-12-31, 2024-12-31 09:30, '31 December 2024'."
)

# Validation error messages returned by the HTTP API (not configurable)
ERROR_TASK_REQUIRED = "Task is required"
ERROR_TASKS_REQUIRED = "Tasks array is required"
ERROR_INVALID_ADVICE_TYPE = "Invalid advice type"
ERROR_MESSAGE_REQUIRED = "Message required"

# Config key -> environment variable
CONFIG_ENV_VARS: Dict[str, str] = {
    "ai_provider": "AI_PROVIDER",
    "ai_api_key": "AI_API_KEY",
    "ai_base_url": "AI_BASE_URL",
    "ai_model": "AI_MODEL",
    "ai_timeout": "AI_TIMEOUT",
}
SECRET_CONFIG_KEYS = ["ai_api_key"]


# =============================================================================
# Config Loader
# =============================================================================

_config_manager_instance: Optional['ConfigManager'] = None


def get_data_dir() -> Path:
    """Resolve the data directory from GTD_DATA_DIR or the default."""
    return Path(os.environ.get(DATA_DIR_ENV_VAR) or DEFAULT_DATA_DIR)


class ConfigManager:
    """
    Resolves configuration values from the environment, config.json and defaults.

    Lookup order for a key:
        1. The environment variable mapped in CONFIG_ENV_VARS (non-empty only)
        2. The key in <data_dir>/config.json
        3. The default passed by the caller

    This class is independent of StorageManager to avoid cyclic dependencies.

    Usage:
        config = ConfigManager()
        provider = config.get_str('ai_provider', DEFAULT_AI_PROVIDER)

        config = ConfigManager(data_dir=Path("/tmp/gtd"))
        timeout = config.get_int('ai_timeout', DEFAULT_AI_TIMEOUT)
    """

    def __init__(self, config_path: Optional[Path] = None, data_dir: Optional[Path] = None) -> None:
        """
        Initialize ConfigManager.

        Args:
            config_path: Direct path to config.json file. Takes precedence over data_dir.
            data_dir: Path to the data directory. Config path will be data_dir/config.json.
        """
        self._config: Optional[dict] = None

        if config_path is not None:
            self._config_path = config_path
        elif data_dir is not None:
            self._config_path = data_dir / "config.json"
        else:
            self._config_path = get_data_dir() / "config.json"

    def _load_config(self) -> dict:
        """Load config from config.json file."""
        if self._config is not None:
            return self._config

        if self._config_path.exists():
            try:
                with open(self._config_path, "r") as f:
                    self._config = json.load(f)
            except (json.JSONDecodeError, IOError):
                self._config = {}
        else:
            self._config = {}

        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a config value with fallback to default.

        Args:
            key: Configuration key name.
            default: Default value if key not found.

        Returns:
            Config value or default.
        """
        env_var = CONFIG_ENV_VARS.get(key)
        if env_var:
            env_value = os.environ.get(env_var)
            if env_value:
                return env_value

        config = self._load_config()
        value = config.get(key)
        return default if value is None else value

    def get_int(self, key: str, default: int) -> int:
        """Get an integer config value with fallback."""
        value = self.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def get_str(self, key: str, default: Optional[str]) -> Optional[str]:
        """Get a string config value with fallback."""
        value = self.get(key, default)
        return str(value) if value is not None else default

    def reload(self) -> dict:
        """Force reload of config from disk."""
        self._config = None
        return self._load_config()

    @property
    def config_path(self) -> Path:
        """Get the config file path."""
        return self._config_path


def get_config_manager(reset: bool = False) -> ConfigManager:
    """
    Get the singleton ConfigManager instance with default path.

    Args:
        reset: If True, reset the singleton and create a new instance.

    Returns:
        ConfigManager singleton instance.
    """
    global _config_manager_instance
    if _config_manager_instance is None or reset:
        _config_manager_instance = ConfigManager()
    return _config_manager_instance


def reset_config_manager() -> None:
    """Reset the singleton ConfigManager instance (useful for testing)."""
    global _config_manager_instance
    _config_manager_instance = None
