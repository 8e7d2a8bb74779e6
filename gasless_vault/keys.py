"""
Caller identities and instruction signatures (secp256k1)
"""

import hashlib
import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from ecdsa import SigningKey, VerifyingKey, SECP256k1, BadSignatureError
from ecdsa.keys import MalformedPointError

from .errors import InvalidSignature


def instruction_message(instruction: str, params: Dict[str, Any], nonce: str = '') -> bytes:
    """Canonical bytes a caller signs for one instruction"""
    payload = {'instruction': instruction, 'nonce': nonce, 'params': params}
    return json.dumps(payload, sort_keys=True, separators=(',', ':')).encode()


@dataclass(frozen=True)
class Signature:
    """A caller's signature over one instruction and its parameters"""
    pubkey: str  # compressed public key (hex)
    instruction: str
    params: Tuple[Tuple[str, Any], ...]
    signature: str  # hex
    nonce: str = ''  # signed; a program processes each (pubkey, nonce) once

    def params_dict(self) -> Dict[str, Any]:
        return dict(self.params)

    @property
    def replay_key(self) -> Tuple[str, str]:
        return self.pubkey, self.nonce


class Keypair:
    """secp256k1 key pair identifying a vault participant"""

    def __init__(self, private_key: bytes = None):
        if private_key:
            self.private_key = SigningKey.from_string(private_key, curve=SECP256k1, hashfunc=hashlib.sha256)
        else:
            self.private_key = SigningKey.generate(curve=SECP256k1, hashfunc=hashlib.sha256)

        self.public_key = self.private_key.get_verifying_key()

    @classmethod
    def from_secret_hex(cls, secret_hex: str) -> 'Keypair':
        return cls(bytes.fromhex(secret_hex))

    @property
    def pubkey(self) -> str:
        """Compressed public key in hex format"""
        point = self.public_key.pubkey.point

        # 02 for even y, 03 for odd y
        prefix = b'\x02' if point.y() % 2 == 0 else b'\x03'
        return (prefix + point.x().to_bytes(32, 'big')).hex()

    def secret_hex(self) -> str:
        return self.private_key.to_string().hex()

    def sign_message(self, message: bytes) -> str:
        return self.private_key.sign(message).hex()

    def sign_instruction(self, instruction: str, **params) -> Signature:
        """Sign an instruction so the program can attribute it to this key.

        Every call draws a fresh nonce, so two signatures over the same
        request are two separate requests.
        """
        params = json.loads(json.dumps(params))
        nonce = os.urandom(16).hex()
        message = instruction_message(instruction, params, nonce)
        return Signature(
            pubkey=self.pubkey,
            instruction=instruction,
            params=tuple(sorted(params.items())),
            signature=self.sign_message(message),
            nonce=nonce
        )

    def __repr__(self) -> str:
        return f"Keypair({self.pubkey[:16]}...)"


def verify_signature(signature: Signature, instruction: str, **expected) -> str:
    """Check a signature was made for ``instruction`` with ``expected`` params.

    Returns the signer's pubkey. Raises InvalidSignature when the instruction
    or any expected parameter differs from what was signed, or when the
    signature does not verify under the claimed key. Replays are not caught
    here; see ``AccountStore.consume_signatures``.
    """
    if signature.instruction != instruction:
        raise InvalidSignature(f"signed {signature.instruction!r}, expected {instruction!r}")

    signed = signature.params_dict()
    expected = json.loads(json.dumps(expected))
    for name, value in expected.items():
        if signed.get(name) != value:
            raise InvalidSignature(f"parameter {name!r} does not match signed value")

    try:
        vk = VerifyingKey.from_string(bytes.fromhex(signature.pubkey), curve=SECP256k1, hashfunc=hashlib.sha256)
        vk.verify(bytes.fromhex(signature.signature), instruction_message(instruction, signed, signature.nonce))
    except (BadSignatureError, MalformedPointError, ValueError) as e:
        raise InvalidSignature(f"signature does not verify for {signature.pubkey[:16]}...") from e

    return signature.pubkey
