import os
from pathlib import Path
import json
from typing import Dict, Any

from dotenv import load_dotenv

# Package defaults (bundled with code)
PACKAGE_CONFIG_DIR = Path(__file__).parent / "defaults"

# User configs (in project root, gitignored)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
USER_CONFIG_DIR = PROJECT_ROOT / "config"

# Environment variables overriding sheetdb.json keys
ENV_OVERRIDES = {
    "FINANCE_TRACKER_API_URL": "base_url",
    "FINANCE_TRACKER_SCHEMA": "schema",
    "FINANCE_TRACKER_DELETE_STYLE": "delete_style",
    "FINANCE_TRACKER_TIMEOUT": "timeout",
}

class ConfigLoader:
    """Load configuration with user overrides"""

    @staticmethod
    def load_config(config_name: str) -> Dict[str, Any]:
        """
        Load config with fallback: user config -> default config

        Args:
            config_name: Name of the config file (e.g., 'sheetdb.json')

        Raises:
            FileNotFoundError: If no config file was found

        Returns:
            Parsed JSON configuration
        """
        user_config_path = USER_CONFIG_DIR / config_name
        if user_config_path.exists():
            with open(user_config_path) as f:
                return json.load(f)

        default_config_path = PACKAGE_CONFIG_DIR / config_name
        if default_config_path.exists():
            with open(default_config_path) as f:
                return json.load(f)

        raise FileNotFoundError(
            f"Config file '{config_name}' not found in:\n"
            f" - {user_config_path}\n"
            f" - {default_config_path}"
        )

    @staticmethod
    def load_sheetdb_config() -> Dict[str, Any]:
        """
        Load the remote collection settings.

        Values from the environment (or a local .env file) take
        precedence over the JSON files.
        """
        load_dotenv()
        config = dict(ConfigLoader.load_config('sheetdb.json'))
        for env_name, key in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                config[key] = value
        return config
