from dataclasses import dataclass, asdict

from .config import checked_add

VAULT_SEED = b"vault"
TOKEN_VAULT_SEED = b"token_vault"


@dataclass
class Vault:
    """Singleton vault record"""
    address: str
    authority: str  # pubkey allowed to manage the whitelist and tokens
    token_count: int  # registered token sub-vaults
    bump: int  # derivation salt

    def record_token_added(self) -> int:
        """Count one more registered token, failing on u64 overflow"""
        self.token_count = checked_add(self.token_count, 1)
        return self.token_count

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'Vault':
        return cls(**data)


@dataclass
class TokenVault:
    """Binds one mint to the custodial account holding the vault's funds of it"""
    address: str
    mint: str
    token_account: str  # custodial account, owned by ``address``
    vault: str
    bump: int

    def signer_seeds(self) -> list:
        return [TOKEN_VAULT_SEED, self.vault, self.mint]

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'TokenVault':
        return cls(**data)
