"""
Vault setup, token registration and sub-vault lookup
"""

import logging
from typing import Tuple

from .errors import AccountAlreadyInUse, AccountError, InvalidTokenAccount
from .guard import require_authority
from .runtime.derivation import find_program_address
from .runtime.token_program import Mint, TokenAccount
from .vault import Vault, TokenVault, VAULT_SEED, TOKEN_VAULT_SEED
from .whitelist import Whitelist, WHITELIST_SEED

logger = logging.getLogger(__name__)


class TokenVaultTable:
    """Finds the sub-vault for a mint and checks accounts against it"""

    def __init__(self, store, program_id: str):
        self.store = store
        self.program_id = program_id

    def address(self, vault: str, mint: str) -> Tuple[str, int]:
        return find_program_address([TOKEN_VAULT_SEED, vault, mint], self.program_id)

    def lookup(self, vault: str, mint: str) -> TokenVault:
        address, _ = self.address(vault, mint)
        token_vault = self.store.find(address, TokenVault)
        if token_vault is None:
            raise InvalidTokenAccount(f"Mint {mint[:16]}... is not registered with this vault")
        if token_vault.mint != mint or token_vault.vault != vault:
            raise InvalidTokenAccount("Token vault does not match the requested mint")
        return token_vault

    def token_account(self, address: str, mint: str, owner: str = None) -> TokenAccount:
        """Load a token account, requiring it to hold ``mint`` (and be owned by ``owner``)"""
        try:
            account = self.store.load(address, TokenAccount)
        except AccountError as e:
            raise InvalidTokenAccount(str(e)) from e

        if account.mint != mint:
            raise InvalidTokenAccount(f"Account {address[:16]}... holds a different mint")
        if owner is not None and account.owner != owner:
            raise InvalidTokenAccount(f"Account {address[:16]}... has a different owner")
        return account

    def custodial_account(self, token_vault: TokenVault, address: str = None) -> TokenAccount:
        """The account pooling the vault's funds of this mint, re-validated"""
        return self.token_account(address or token_vault.token_account, token_vault.mint, token_vault.address)


class VaultRegistry:
    """Owns the vault record and everything registered under it"""

    def __init__(self, store, token_program, authority, whitelist_capacity: int):
        self.store = store
        self.token_program = token_program
        self.authority = authority
        self.whitelist_capacity = whitelist_capacity
        self.tokens = TokenVaultTable(store, authority.program_id)

    @property
    def program_id(self) -> str:
        return self.authority.program_id

    def vault_address(self) -> Tuple[str, int]:
        return find_program_address([VAULT_SEED], self.program_id)

    def whitelist_address(self, vault: str) -> Tuple[str, int]:
        return find_program_address([WHITELIST_SEED, vault], self.program_id)

    def load_vault(self) -> Vault:
        address, _ = self.vault_address()
        return self.store.load(address, Vault)

    def load_whitelist(self, vault: Vault) -> Whitelist:
        address, _ = self.whitelist_address(vault.address)
        return self.store.load(address, Whitelist)

    def initialize(self, authority: str) -> Tuple[Vault, Whitelist]:
        """Create the vault and its empty whitelist. Fails if either exists."""
        vault_addr, vault_bump = self.vault_address()
        vault = Vault(address=vault_addr, authority=authority, token_count=0, bump=vault_bump)
        self.store.allocate(vault_addr, vault, payer=authority)

        whitelist_addr, whitelist_bump = self.whitelist_address(vault_addr)
        whitelist = Whitelist(address=whitelist_addr, vault=vault_addr, bump=whitelist_bump)
        self.store.allocate(whitelist_addr, whitelist, capacity=self.whitelist_capacity, payer=authority)

        logger.info("Vault initialized!")
        return vault, whitelist

    def register_token(self, vault: Vault, caller: str, mint: str) -> TokenVault:
        """Create the sub-vault and custodial account for ``mint``"""
        require_authority(vault, caller)
        self.store.load(mint, Mint)

        address, bump = self.tokens.address(vault.address, mint)
        if self.store.exists(address):
            raise AccountAlreadyInUse(f"Mint {mint[:16]}... is already registered")

        custodial = self.token_program.create_account(mint, owner=address, payer=caller)

        token_vault = TokenVault(
            address=address,
            mint=mint,
            token_account=custodial.address,
            vault=vault.address,
            bump=bump
        )
        self.store.allocate(address, token_vault, payer=caller)

        vault.record_token_added()
        logger.info("Token added to vault: %s", mint)
        return token_vault

    def issue_signer(self, token_vault: TokenVault):
        """Capability to move funds out of ``token_vault``'s custodial account"""
        return self.authority.issue(token_vault.signer_seeds(), token_vault.bump)
