"""
In-memory collaborators for the vault
"""

from .balances import BalanceTable, TokenLedger
from .position import RewardPool
from .shares import ShareLedger

__all__ = [
    "BalanceTable",
    "TokenLedger",
    "RewardPool",
    "ShareLedger",
]
