"""
Gasless Vault - whitelisted multi-token custody with three-way distributions
"""

from .config import VaultConfig
from .distribution import DistributionEngine, DistributionRequest
from .keys import Keypair, Signature
from .ledger import BorrowerAccount, BorrowRecord
from .program import VaultProgram
from .vault import Vault, TokenVault
from .whitelist import Whitelist

__version__ = "0.1.0"
__all__ = [
    "VaultConfig",
    "DistributionEngine",
    "DistributionRequest",
    "Keypair",
    "Signature",
    "BorrowerAccount",
    "BorrowRecord",
    "VaultProgram",
    "Vault",
    "TokenVault",
    "Whitelist"
]
