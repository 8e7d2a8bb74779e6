"""
Caller checks run before an instruction touches any state
"""

from .errors import NotWhitelisted, Unauthorized


def require_authority(vault, caller: str):
    """Fail unless ``caller`` is the vault's authority"""
    if caller != vault.authority:
        raise Unauthorized(f"{caller[:16]}... is not the vault authority")


def require_whitelisted(whitelist, caller: str):
    """Fail unless ``caller`` is on the whitelist"""
    if not whitelist.contains(caller):
        raise NotWhitelisted(f"{caller[:16]}... is not whitelisted")
