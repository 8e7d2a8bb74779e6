"""
Per-borrower record of cumulative amounts drawn from the vault
"""

import logging
from dataclasses import dataclass, asdict, field
from typing import List, Optional

from .config import checked_add
from .runtime.derivation import find_program_address

logger = logging.getLogger(__name__)

BORROWER_SEED = b"borrower"


@dataclass
class BorrowRecord:
    """Total borrowed of one mint"""
    mint: str
    amount: int


@dataclass
class BorrowerAccount:
    """Everything one borrower has drawn from one vault, by mint"""
    borrower: str
    vault: str
    bump: int
    borrowed_amounts: List[BorrowRecord] = field(default_factory=list)

    def borrowed(self, mint: str) -> int:
        for record in self.borrowed_amounts:
            if record.mint == mint:
                return record.amount
        return 0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'BorrowerAccount':
        records = [BorrowRecord(**r) for r in data.get('borrowed_amounts', [])]
        return cls(
            borrower=data['borrower'],
            vault=data['vault'],
            bump=data['bump'],
            borrowed_amounts=records
        )


class BorrowerLedger:
    """Creates and updates borrower accounts in the account store"""

    def __init__(self, store, program_id: str, capacity: int):
        self.store = store
        self.program_id = program_id
        self.capacity = capacity  # mints per borrower

    def account_address(self, vault: str, borrower: str):
        return find_program_address([BORROWER_SEED, vault, borrower], self.program_id)

    def get(self, vault: str, borrower: str) -> Optional[BorrowerAccount]:
        address, _ = self.account_address(vault, borrower)
        return self.store.find(address, BorrowerAccount)

    def get_or_create(self, vault: str, borrower: str, payer: str) -> BorrowerAccount:
        address, bump = self.account_address(vault, borrower)
        account = self.store.find(address, BorrowerAccount)
        if account is None:
            account = BorrowerAccount(borrower=borrower, vault=vault, bump=bump)
            self.store.allocate(address, account, capacity=self.capacity, payer=payer)
            logger.debug("Created borrower account for %s (paid by %s)", borrower[:16], payer[:16])
        return account

    def record_borrow(self, vault: str, borrower: str, mint: str, amount: int, payer: str) -> int:
        """Add ``amount`` to the borrower's running total for ``mint``.

        Returns the new total. Fails MathOverflow if the total would exceed
        u64, or CapacityExceeded if a new mint does not fit in the record.
        """
        account = self.get_or_create(vault, borrower, payer)

        for record in account.borrowed_amounts:
            if record.mint == mint:
                record.amount = checked_add(record.amount, amount)
                return record.amount

        address, _ = self.account_address(vault, borrower)
        self.store.ensure_capacity(address, len(account.borrowed_amounts) + 1)
        account.borrowed_amounts.append(BorrowRecord(mint=mint, amount=amount))
        return amount
