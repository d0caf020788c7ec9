"""
mcpconfig configuration layer.

- Settings: MCPCONFIG_* environment settings (pydantic-settings)
- SensitivityClassifier: routes keys to the secrets or value store
- ConfigResolver: priority lookup across stores and scopes
- ConfigManager: the entry point used by the CLI

Only settings are re-exported here; import the other modules directly.
"""

from mcpconfig.config.settings import APP_NAME, DEFAULT_SERVER_NAME, Settings, get_settings

__all__ = [
    "APP_NAME",
    "DEFAULT_SERVER_NAME",
    "Settings",
    "get_settings",
]
