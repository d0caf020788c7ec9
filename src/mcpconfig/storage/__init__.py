"""
Storage backends.

- ValueStore: non-sensitive values in a JSON document per scope
- SecretStore: sensitive values in a ``NAME=value`` file per scope
- GitignoreManager: keeps the local secrets file out of version control
"""

from mcpconfig.storage.gitignore import GitignoreManager
from mcpconfig.storage.keys import from_secret_name, to_secret_name
from mcpconfig.storage.secrets import SecretStore, parse_secrets, serialize_secrets
from mcpconfig.storage.values import ValueStore

__all__ = [
    "ValueStore",
    "SecretStore",
    "GitignoreManager",
    "parse_secrets",
    "serialize_secrets",
    "to_secret_name",
    "from_secret_name",
]
