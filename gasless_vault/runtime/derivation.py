"""
Deterministic program-derived addresses
"""

import hashlib
from typing import List, Tuple, Union

from ecdsa import SECP256k1

Seed = Union[bytes, str]

PDA_MARKER = b"ProgramDerivedAddress"


def _seed_bytes(seed: Seed) -> bytes:
    # Hex identities are hashed as their raw bytes
    if isinstance(seed, str):
        return bytes.fromhex(seed)
    return seed


def is_on_curve(address: bytes) -> bool:
    """True if ``address`` is the x-coordinate of some secp256k1 point"""
    curve = SECP256k1.curve
    p = curve.p()
    x = int.from_bytes(address, 'big')
    if x >= p:
        return False

    y_squared = (pow(x, 3, p) + curve.a() * x + curve.b()) % p
    # Euler's criterion
    return y_squared == 0 or pow(y_squared, (p - 1) // 2, p) == 1


def create_program_address(seeds: List[Seed], bump: int, program_id: str) -> bytes:
    hasher = hashlib.sha256()
    for seed in seeds:
        hasher.update(_seed_bytes(seed))
    hasher.update(bytes([bump]))
    hasher.update(bytes.fromhex(program_id))
    hasher.update(PDA_MARKER)
    return hasher.digest()


def find_program_address(seeds: List[Seed], program_id: str) -> Tuple[str, int]:
    """Derive the address owned by ``program_id`` for ``seeds``.

    Bumps are tried from 255 downwards; the first digest that is not a curve
    x-coordinate wins, so no key pair can ever sign for the address.
    """
    for bump in range(255, -1, -1):
        address = create_program_address(seeds, bump, program_id)
        if not is_on_curve(address):
            return address.hex(), bump

    raise ValueError("Unable to find a viable program address bump seed")
