"""
Program signing authority for program-derived addresses
"""

import os
from dataclasses import dataclass
from typing import List, Tuple

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

from ..keys import Signature
from .derivation import create_program_address


@dataclass(frozen=True)
class SignerCapability:
    """Permission to act as one program-derived address.

    Only the issuing ProgramAuthority can produce a valid tag, so holding
    one of these is the sole way to move funds owned by ``address``.
    """
    program_id: str
    seeds: Tuple[bytes, ...]
    bump: int
    address: str
    tag: bytes


@dataclass(frozen=True)
class ForwardedSigner:
    """A caller's signature that a program has checked and passes on to the token program"""
    program_id: str
    signature: Signature
    tag: bytes

    @property
    def signer(self) -> str:
        return self.signature.pubkey


class ProgramAuthority:
    """Issues and checks signer capabilities for one program id"""

    def __init__(self, program_id: str, secret: bytes = None):
        self.program_id = program_id
        self._secret = secret or os.urandom(32)

    def _hmac(self, *parts: bytes) -> hmac.HMAC:
        h = hmac.HMAC(self._secret, hashes.SHA256())
        h.update(bytes.fromhex(self.program_id))
        for part in parts:
            h.update(part)
        return h

    def _tag(self, *parts: bytes) -> bytes:
        return self._hmac(*parts).finalize()

    def _check(self, tag: bytes, *parts: bytes) -> bool:
        try:
            self._hmac(*parts).verify(tag)
        except InvalidSignature:
            return False
        return True

    def issue(self, seeds: List[bytes], bump: int) -> SignerCapability:
        address = create_program_address(seeds, bump, self.program_id).hex()
        return SignerCapability(
            program_id=self.program_id,
            seeds=tuple(seeds),
            bump=bump,
            address=address,
            tag=self._tag(bytes.fromhex(address))
        )

    def verify(self, capability: SignerCapability) -> bool:
        if capability.program_id != self.program_id:
            return False

        # The address must follow from the seeds, not just carry a valid tag
        derived = create_program_address(list(capability.seeds), capability.bump, self.program_id).hex()
        if derived != capability.address:
            return False

        return self._check(capability.tag, bytes.fromhex(capability.address))

    def forward(self, signature: Signature) -> ForwardedSigner:
        """Lend an already verified caller signature to a token program call"""
        return ForwardedSigner(
            program_id=self.program_id,
            signature=signature,
            tag=self._tag(b"forward", bytes.fromhex(signature.signature), signature.nonce.encode())
        )

    def verify_forwarded(self, forwarded: ForwardedSigner) -> bool:
        if forwarded.program_id != self.program_id:
            return False
        signature = forwarded.signature
        return self._check(forwarded.tag, b"forward", bytes.fromhex(signature.signature), signature.nonce.encode())
