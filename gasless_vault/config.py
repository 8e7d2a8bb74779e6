import os
from dataclasses import dataclass

from .errors import InvalidAmount, MathOverflow

MAX_U64 = 2**64 - 1


def validate_amount(amount) -> int:
    """Token amounts are positive u64 integers"""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"{amount!r} is not an integer amount")
    if amount <= 0 or amount > MAX_U64:
        raise InvalidAmount(f"{amount} is outside 1..{MAX_U64}")
    return amount


def checked_add(a: int, b: int) -> int:
    """u64 addition that fails instead of wrapping"""
    total = a + b
    if total > MAX_U64:
        raise MathOverflow(f"{a} + {b} exceeds u64")
    return total


@dataclass
class VaultConfig:
    """Storage limits and distribution policy for a vault"""

    # Fixed capacities reserved when records are allocated
    whitelist_capacity: int  # addresses
    ledger_capacity: int  # token records per borrower

    # Reject the same recipient account appearing twice in one distribution
    allow_duplicate_recipients: bool

    def __post_init__(self):
        if self.whitelist_capacity <= 0:
            raise ValueError("Whitelist capacity must be positive")
        if self.ledger_capacity <= 0:
            raise ValueError("Ledger capacity must be positive")

    @classmethod
    def default(cls) -> 'VaultConfig':
        return cls(
            whitelist_capacity=50,
            ledger_capacity=10,
            allow_duplicate_recipients=False
        )

    @classmethod
    def permissive(cls) -> 'VaultConfig':
        """Same limits, but recipients may repeat"""
        return cls(
            whitelist_capacity=50,
            ledger_capacity=10,
            allow_duplicate_recipients=True
        )

    @classmethod
    def from_env(cls, environ=None) -> 'VaultConfig':
        """Build a config from GASLESS_VAULT_* variables, falling back to defaults"""
        environ = os.environ if environ is None else environ
        base = cls.default()

        duplicates = environ.get('GASLESS_VAULT_ALLOW_DUPLICATE_RECIPIENTS')
        return cls(
            whitelist_capacity=int(environ.get('GASLESS_VAULT_WHITELIST_CAPACITY', base.whitelist_capacity)),
            ledger_capacity=int(environ.get('GASLESS_VAULT_LEDGER_CAPACITY', base.ledger_capacity)),
            allow_duplicate_recipients=(
                base.allow_duplicate_recipients if duplicates is None
                else duplicates.strip().lower() in ('1', 'true', 'yes', 'on')
            )
        )
