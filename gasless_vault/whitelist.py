import logging
from dataclasses import dataclass, asdict, field
from typing import List

from .guard import require_authority

logger = logging.getLogger(__name__)

WHITELIST_SEED = b"whitelist"


@dataclass
class Whitelist:
    """Addresses allowed to borrow from the vault"""
    address: str
    vault: str
    bump: int
    addresses: List[str] = field(default_factory=list)

    def contains(self, address: str) -> bool:
        return address in self.addresses

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'Whitelist':
        return cls(**data)


def add_address(store, vault, whitelist: Whitelist, caller: str, address: str) -> bool:
    """Whitelist ``address``. Returns False if it was already present.

    The whitelist lives in a record of fixed capacity; adding past it fails
    with CapacityExceeded.
    """
    require_authority(vault, caller)

    if whitelist.contains(address):
        logger.info("Address already in whitelist: %s", address)
        return False

    store.ensure_capacity(whitelist.address, len(whitelist.addresses) + 1)
    whitelist.addresses.append(address)
    logger.info("Address added to whitelist: %s", address)
    return True


def remove_address(vault, whitelist: Whitelist, caller: str, address: str) -> bool:
    """Drop ``address`` from the whitelist. Returns False if it was absent."""
    require_authority(vault, caller)

    if not whitelist.contains(address):
        logger.info("Address not found in whitelist: %s", address)
        return False

    # Order carries no meaning; swap the last entry into the hole
    index = whitelist.addresses.index(address)
    last = whitelist.addresses.pop()
    if index < len(whitelist.addresses):
        whitelist.addresses[index] = last

    logger.info("Address removed from whitelist: %s", address)
    return True
