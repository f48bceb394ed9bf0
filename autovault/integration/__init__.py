"""
Vault engine and its configuration / snapshot layers
"""

from .config import VaultConfig, load_vault_config
from .vault_engine import AutocompoundVault, make_in_memory_vault
from .vault_snapshot import snapshot_hash, vault_to_dict

__all__ = [
    "VaultConfig",
    "load_vault_config",
    "AutocompoundVault",
    "make_in_memory_vault",
    "snapshot_hash",
    "vault_to_dict",
]
