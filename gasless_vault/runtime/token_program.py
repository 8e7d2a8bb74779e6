"""
Token balances and the transfer primitive the vault program calls into
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Union

from ..config import MAX_U64
from ..errors import (
    InsufficientTokenBalance, TokenAmountOverflow, TokenMintMismatch, TokenOwnerMismatch,
)
from ..keys import Signature, verify_signature
from .accounts import AccountStore
from .authority import ForwardedSigner, ProgramAuthority, SignerCapability

logger = logging.getLogger(__name__)

Authority = Union[Signature, SignerCapability, ForwardedSigner]


@dataclass
class Mint:
    """A token type"""
    address: str
    decimals: int
    mint_authority: str
    supply: int = 0


@dataclass
class TokenAccount:
    """Holding account for one mint, controlled by ``owner``"""
    address: str
    mint: str
    owner: str
    amount: int = 0


def _new_address() -> str:
    return os.urandom(32).hex()


class TokenProgram:
    """Creates mints and token accounts, and moves balances between them"""

    def __init__(self, store: AccountStore):
        self.store = store
        self._programs: Dict[str, ProgramAuthority] = {}

    def register_program(self, authority: ProgramAuthority):
        """Allow ``authority`` to sign for addresses derived from its program id"""
        self._programs[authority.program_id] = authority

    def _signer(self, authority: Authority, instruction: str, **expected) -> str:
        """Resolve an authority to the address it proves control of.

        A caller signature must be for exactly this call and is spent by it.
        """
        if isinstance(authority, SignerCapability):
            program = self._programs.get(authority.program_id)
            if program is None or not program.verify(authority):
                raise TokenOwnerMismatch("Signer capability was not issued by a registered program")
            return authority.address

        if isinstance(authority, ForwardedSigner):
            program = self._programs.get(authority.program_id)
            if program is None or not program.verify_forwarded(authority):
                raise TokenOwnerMismatch("Forwarded signer was not issued by a registered program")
            return authority.signer

        signer = verify_signature(authority, instruction, **expected)
        self.store.consume_signatures(authority)
        return signer

    def create_mint(self, decimals: int, mint_authority: str, address: str = None) -> Mint:
        mint = Mint(address=address or _new_address(), decimals=decimals, mint_authority=mint_authority)
        return self.store.allocate(mint.address, mint)

    def create_account(self, mint: str, owner: str, address: str = None, payer: str = None) -> TokenAccount:
        self.store.load(mint, Mint)
        account = TokenAccount(address=address or _new_address(), mint=mint, owner=owner)
        return self.store.allocate(account.address, account, payer=payer)

    def get_account(self, address: str) -> TokenAccount:
        return self.store.load(address, TokenAccount)

    def balance_of(self, address: str) -> int:
        return self.get_account(address).amount

    def mint_to(self, mint: str, destination: str, amount: int, authority: Authority) -> int:
        with self.store.transaction():
            mint_record = self.store.load(mint, Mint)
            account = self.get_account(destination)

            if account.mint != mint:
                raise TokenMintMismatch(f"Account {destination[:16]}... does not hold this mint")
            signer = self._signer(authority, 'mint_to', mint=mint, account=destination, amount=amount)
            if signer != mint_record.mint_authority:
                raise TokenOwnerMismatch("Only the mint authority can mint")
            if mint_record.supply + amount > MAX_U64:
                raise TokenAmountOverflow("Mint supply would overflow")

            mint_record.supply += amount
            account.amount += amount
            return account.amount

    def transfer(self, source: str, destination: str, amount: int, authority: Authority) -> int:
        """Move ``amount`` from source to destination; returns the source balance"""
        with self.store.transaction():
            src = self.get_account(source)
            dst = self.get_account(destination)

            if src.mint != dst.mint:
                raise TokenMintMismatch("Source and destination hold different mints")
            signer = self._signer(authority, 'transfer', source=source, destination=destination, amount=amount)
            if signer != src.owner:
                raise TokenOwnerMismatch(f"Authority does not own {source[:16]}...")
            if src.amount < amount:
                raise InsufficientTokenBalance(f"Balance {src.amount} is below {amount}")
            if dst.amount + amount > MAX_U64:
                raise TokenAmountOverflow("Destination balance would overflow")

            src.amount -= amount
            dst.amount += amount

            logger.debug("Transferred %d from %s to %s", amount, source[:16], destination[:16])
            return src.amount
