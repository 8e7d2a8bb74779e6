"""
Persistent-record allocator with an all-or-nothing execution boundary
"""

import copy
import dataclasses
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Optional, Set, Tuple

from ..errors import (
    AccountAlreadyInUse, AccountNotFound, AccountTypeMismatch, CapacityExceeded, SignatureReplayed,
)

logger = logging.getLogger(__name__)


@dataclass
class AccountInfo:
    """A record plus the storage facts the allocator tracks for it"""
    address: str
    data: Any
    capacity: Optional[int] = None  # max entries in the record's growable list
    payer: Optional[str] = None


def _restore(record: Any, saved: Any):
    """Write ``saved`` back into ``record`` so references to it stay valid"""
    if isinstance(record, list):
        record[:] = saved
    elif isinstance(record, dict):
        record.clear()
        record.update(saved)
    else:
        for field in dataclasses.fields(record):
            setattr(record, field.name, getattr(saved, field.name))


class AccountStore:
    """In-memory account database.

    Mutations are expected to happen inside ``transaction()``. The first time
    a transaction touches a record it keeps a copy of it; if the block
    raises, those records are restored in place and records allocated in
    the block are dropped.
    """

    def __init__(self):
        self._accounts: Dict[str, AccountInfo] = {}
        self._lock = threading.RLock()
        self._depth = 0
        self._saved: Dict[str, Any] = {}
        self._created: Set[str] = set()
        self._processed: Set[Tuple[str, str]] = set()

    @contextmanager
    def transaction(self):
        with self._lock:
            outermost = self._depth == 0
            self._depth += 1
            try:
                yield self
            except BaseException:
                if outermost:
                    self._rollback()
                raise
            finally:
                self._depth -= 1
                if outermost:
                    self._saved = {}
                    self._created = set()

    def _rollback(self):
        for address in self._created:
            self._accounts.pop(address, None)
        for address, saved in self._saved.items():
            _restore(self._accounts[address].data, saved)

        logger.debug("Transaction rolled back (%d restored, %d dropped)", len(self._saved), len(self._created))

    def allocate(self, address: str, data: Any, capacity: int = None, payer: str = None) -> Any:
        if not isinstance(data, (list, dict)) and not dataclasses.is_dataclass(data):
            raise TypeError(f"Cannot store {type(data).__name__} records")

        with self._lock:
            if address in self._accounts:
                raise AccountAlreadyInUse(f"Account {address[:16]}... already in use")

            self._accounts[address] = AccountInfo(address, data, capacity, payer)
            if self._depth:
                self._created.add(address)
            return data

    def exists(self, address: str) -> bool:
        with self._lock:
            return address in self._accounts

    def info(self, address: str) -> AccountInfo:
        with self._lock:
            try:
                info = self._accounts[address]
            except KeyError:
                raise AccountNotFound(f"Account {address[:16]}... not found") from None

            if self._depth and address not in self._saved and address not in self._created:
                self._saved[address] = copy.deepcopy(info.data)
            return info

    def load(self, address: str, kind: type) -> Any:
        """Fetch a record, checking it is of the expected type"""
        data = self.info(address).data
        if not isinstance(data, kind):
            raise AccountTypeMismatch(
                f"Account {address[:16]}... holds {type(data).__name__}, expected {kind.__name__}"
            )
        return data

    def find(self, address: str, kind: type) -> Optional[Any]:
        with self._lock:
            if address not in self._accounts:
                return None
            return self.load(address, kind)

    def ensure_capacity(self, address: str, used: int):
        """Fail if a record would hold more entries than were reserved for it"""
        capacity = self.info(address).capacity
        if capacity is not None and used > capacity:
            raise CapacityExceeded(f"Account {address[:16]}... is full ({capacity} entries)")

    def consume_signatures(self, *signatures):
        """Mark signed instructions as processed.

        Each (pubkey, nonce) is accepted once. Processing survives a rollback:
        a request that failed is still spent.
        """
        keys = [signature.replay_key for signature in signatures]
        with self._lock:
            if len(set(keys)) != len(keys) or any(key in self._processed for key in keys):
                raise SignatureReplayed("Signed instruction has already been processed")
            self._processed.update(keys)

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)
