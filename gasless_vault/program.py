"""
The vault program: six instructions, each verified and executed atomically
"""

import hashlib
import logging
from typing import List, Optional

from .config import VaultConfig, validate_amount
from .distribution import DistributionEngine, DistributionRequest
from .keys import Signature, verify_signature
from .ledger import BorrowerAccount, BorrowerLedger
from .registry import VaultRegistry
from .runtime.accounts import AccountStore
from .runtime.authority import ProgramAuthority
from .runtime.token_program import TokenProgram
from .vault import TokenVault
from .whitelist import add_address, remove_address

logger = logging.getLogger(__name__)

DEFAULT_PROGRAM_ID = hashlib.sha256(b"gasless_vault").hexdigest()


class VaultProgram:
    """Entry point for every vault operation.

    Callers sign each instruction with ``Keypair.sign_instruction``; the
    signed parameters must match the call, and once the vault exists they
    include its address under ``vault``. A signature that verifies is spent
    on first submission, whether or not the instruction then succeeds.
    """

    def __init__(self, store: AccountStore = None, config: VaultConfig = None,
                 program_id: str = None, secret: bytes = None):
        self.config = config or VaultConfig.default()
        self.store = store or AccountStore()
        self.token_program = TokenProgram(self.store)

        self.authority = ProgramAuthority(program_id or DEFAULT_PROGRAM_ID, secret)
        self.token_program.register_program(self.authority)

        self.registry = VaultRegistry(
            self.store, self.token_program, self.authority, self.config.whitelist_capacity
        )
        self.ledger = BorrowerLedger(self.store, self.authority.program_id, self.config.ledger_capacity)
        self.engine = DistributionEngine(
            self.registry, self.ledger, self.token_program, self.config.allow_duplicate_recipients
        )

    @property
    def program_id(self) -> str:
        return self.authority.program_id

    @property
    def vault_address(self) -> str:
        return self.registry.vault_address()[0]

    def initialize(self, authority_sig: Signature) -> dict:
        authority = verify_signature(authority_sig, 'initialize')
        self.store.consume_signatures(authority_sig)

        with self.store.transaction():
            vault, whitelist = self.registry.initialize(authority)

        return {'vault': vault.address, 'whitelist': whitelist.address, 'bump': vault.bump}

    def add_to_whitelist(self, authority_sig: Signature, address: str) -> bool:
        caller = verify_signature(authority_sig, 'add_to_whitelist', vault=self.vault_address, address=address)
        self.store.consume_signatures(authority_sig)

        with self.store.transaction():
            vault = self.registry.load_vault()
            whitelist = self.registry.load_whitelist(vault)
            return add_address(self.store, vault, whitelist, caller, address)

    def remove_from_whitelist(self, authority_sig: Signature, address: str) -> bool:
        caller = verify_signature(authority_sig, 'remove_from_whitelist', vault=self.vault_address, address=address)
        self.store.consume_signatures(authority_sig)

        with self.store.transaction():
            vault = self.registry.load_vault()
            whitelist = self.registry.load_whitelist(vault)
            return remove_address(vault, whitelist, caller, address)

    def register_token(self, authority_sig: Signature, mint: str) -> dict:
        caller = verify_signature(authority_sig, 'register_token', vault=self.vault_address, mint=mint)
        self.store.consume_signatures(authority_sig)

        with self.store.transaction():
            vault = self.registry.load_vault()
            token_vault = self.registry.register_token(vault, caller, mint)

        return {'token_vault': token_vault.address, 'token_account': token_vault.token_account}

    add_token = register_token

    def deposit(self, depositor_sig: Signature, mint: str, depositor_token_account: str, amount: int,
                vault_token_account: str = None) -> int:
        """Move depositor funds into the custodial account; returns its new balance"""
        depositor = verify_signature(
            depositor_sig, 'deposit',
            vault=self.vault_address, mint=mint,
            depositor_token_account=depositor_token_account, amount=amount
        )
        self.store.consume_signatures(depositor_sig)

        with self.store.transaction():
            vault = self.registry.load_vault()
            token_vault = self.registry.tokens.lookup(vault.address, mint)
            custodial = self.registry.tokens.custodial_account(token_vault, vault_token_account)
            self.registry.tokens.token_account(depositor_token_account, mint, owner=depositor)

            validate_amount(amount)
            self.token_program.transfer(
                depositor_token_account, custodial.address, amount, self.authority.forward(depositor_sig)
            )

            logger.info("Deposited %d tokens to vault", amount)
            return custodial.amount

    def borrow_and_distribute(self, borrower_sig: Signature, fee_payer_sig: Signature, mint: str,
                              amount: int, recipients: List[str], vault_token_account: str = None) -> dict:
        params = dict(vault=self.vault_address, mint=mint, amount=amount, recipients=list(recipients))
        borrower = verify_signature(borrower_sig, 'borrow_and_distribute', **params)
        fee_payer = verify_signature(fee_payer_sig, 'borrow_and_distribute', **params)
        self.store.consume_signatures(borrower_sig, fee_payer_sig)

        request = DistributionRequest(
            borrower=borrower,
            fee_payer=fee_payer,
            mint=mint,
            amount=amount,
            recipients=list(recipients),
            vault_token_account=vault_token_account
        )

        with self.store.transaction():
            vault = self.registry.load_vault()
            whitelist = self.registry.load_whitelist(vault)
            return self.engine.borrow_and_distribute(vault, whitelist, request)

    # Read-only views; each returns a copy, never the stored record

    def vault_state(self) -> dict:
        with self.store.transaction():
            return self.registry.load_vault().to_dict()

    def whitelist_state(self) -> dict:
        with self.store.transaction():
            vault = self.registry.load_vault()
            return self.registry.load_whitelist(vault).to_dict()

    def token_vault(self, mint: str) -> TokenVault:
        with self.store.transaction():
            return TokenVault.from_dict(self.registry.tokens.lookup(self.vault_address, mint).to_dict())

    def custodial_balance(self, mint: str) -> int:
        with self.store.transaction():
            token_vault = self.registry.tokens.lookup(self.vault_address, mint)
            return self.registry.tokens.custodial_account(token_vault).amount

    def borrower_account(self, borrower: str) -> Optional[BorrowerAccount]:
        with self.store.transaction():
            account = self.ledger.get(self.vault_address, borrower)
            return BorrowerAccount.from_dict(account.to_dict()) if account else None
