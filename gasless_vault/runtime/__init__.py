"""
Host runtime - the account database, address derivation, program signing
and token transfers the vault program runs on top of
"""

from .accounts import AccountStore
from .authority import ForwardedSigner, ProgramAuthority, SignerCapability
from .derivation import find_program_address
from .token_program import Mint, TokenAccount, TokenProgram

__all__ = [
    "AccountStore",
    "ForwardedSigner",
    "ProgramAuthority",
    "SignerCapability",
    "find_program_address",
    "Mint",
    "TokenAccount",
    "TokenProgram"
]
