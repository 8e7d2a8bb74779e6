import unittest

from gasless_vault.keys import Keypair
from gasless_vault.program import VaultProgram


class VaultTestCase(unittest.TestCase):
    """Initialized vault with one registered mint and a whitelisted borrower"""

    config = None

    def setUp(self):
        self.program = VaultProgram(config=self.config)
        self.tokens = self.program.token_program

        self.authority = Keypair()
        self.borrower = Keypair()
        self.fee_payer = Keypair()
        self.depositor = Keypair()

        self.program.initialize(self.authority.sign_instruction('initialize'))
        self.vault = self.program.vault_address

        self.mint = self.create_mint()
        self.register(self.mint)
        self.whitelist(self.borrower.pubkey)

        self.recipients = [self.new_account(self.mint) for _ in range(3)]

    def sign(self, keypair, instruction, **params):
        return keypair.sign_instruction(instruction, vault=self.vault, **params)

    def create_mint(self) -> str:
        return self.tokens.create_mint(9, self.authority.pubkey).address

    def register(self, mint: str) -> dict:
        return self.program.register_token(self.sign(self.authority, 'register_token', mint=mint), mint)

    def whitelist(self, address: str) -> bool:
        return self.program.add_to_whitelist(self.sign(self.authority, 'add_to_whitelist', address=address), address)

    def unwhitelist(self, address: str) -> bool:
        return self.program.remove_from_whitelist(
            self.sign(self.authority, 'remove_from_whitelist', address=address), address
        )

    def new_account(self, mint: str, owner: str = None) -> str:
        owner = owner or Keypair().pubkey
        return self.tokens.create_account(mint, owner).address

    def fund(self, mint: str, amount: int, owner: Keypair = None) -> str:
        """Token account for ``owner`` (the depositor by default) holding ``amount``"""
        owner = owner or self.depositor
        account = self.new_account(mint, owner.pubkey)
        sig = self.authority.sign_instruction('mint_to', mint=mint, account=account, amount=amount)
        self.tokens.mint_to(mint, account, amount, sig)
        return account

    def deposit(self, amount: int, mint: str = None) -> int:
        mint = mint or self.mint
        source = self.fund(mint, amount)
        sig = self.sign(self.depositor, 'deposit', mint=mint, depositor_token_account=source, amount=amount)
        return self.program.deposit(sig, mint, source, amount)

    def borrow(self, amount: int, mint: str = None, borrower: Keypair = None, fee_payer: Keypair = None,
               recipients=None, **kwargs) -> dict:
        mint = mint or self.mint
        borrower = borrower or self.borrower
        fee_payer = fee_payer or self.fee_payer
        recipients = recipients or self.recipients

        params = dict(mint=mint, amount=amount, recipients=list(recipients))
        return self.program.borrow_and_distribute(
            self.sign(borrower, 'borrow_and_distribute', **params),
            self.sign(fee_payer, 'borrow_and_distribute', **params),
            mint, amount, recipients, **kwargs
        )

    def balances(self, accounts=None):
        return [self.tokens.balance_of(a) for a in (accounts or self.recipients)]
