"""
Whitelisted borrowing, split equally between three recipients
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .config import validate_amount
from .errors import InsufficientFunds, InvalidDistributionAmount, InvalidRecipient, Unauthorized
from .guard import require_whitelisted

logger = logging.getLogger(__name__)

RECIPIENT_COUNT = 3


@dataclass
class DistributionRequest:
    """A whitelisted borrower's request to pay out ``amount`` of ``mint``"""
    borrower: str  # pubkey, must be whitelisted
    fee_payer: str  # pubkey covering execution cost
    mint: str
    amount: int
    recipients: List[str]  # token accounts
    vault_token_account: Optional[str] = None  # defaults to the registered custodial account

    @property
    def per_recipient(self) -> int:
        return self.amount // RECIPIENT_COUNT


class DistributionEngine:
    """Checks a distribution request, then records it and pays it out"""

    def __init__(self, registry, ledger, token_program, allow_duplicate_recipients: bool = False):
        self.registry = registry
        self.ledger = ledger
        self.token_program = token_program
        self.allow_duplicate_recipients = allow_duplicate_recipients

    def _check_recipients(self, request: DistributionRequest, custodial: str):
        if len(request.recipients) != RECIPIENT_COUNT:
            raise InvalidRecipient(f"Exactly {RECIPIENT_COUNT} recipients are required")

        for recipient in request.recipients:
            self.registry.tokens.token_account(recipient, request.mint)
            if recipient == custodial:
                raise InvalidRecipient("The custodial account cannot receive a distribution")

        if not self.allow_duplicate_recipients and len(set(request.recipients)) != RECIPIENT_COUNT:
            raise InvalidRecipient("Recipients must be distinct accounts")

    def borrow_and_distribute(self, vault, whitelist, request: DistributionRequest) -> dict:
        """Draw ``request.amount`` from the vault and send a third to each recipient.

        Every check runs before any state changes. The ledger update and the
        three transfers are only all-or-nothing when called inside the
        account store's transaction, which VaultProgram always does.
        """
        require_whitelisted(whitelist, request.borrower)
        if request.fee_payer == request.borrower:
            raise Unauthorized("The borrower cannot pay for their own distribution")

        token_vault = self.registry.tokens.lookup(vault.address, request.mint)
        custodial = self.registry.tokens.custodial_account(token_vault, request.vault_token_account)
        self._check_recipients(request, custodial.address)

        amount = validate_amount(request.amount)
        if amount % RECIPIENT_COUNT != 0:
            raise InvalidDistributionAmount(f"{amount} cannot be split {RECIPIENT_COUNT} ways")
        if custodial.amount < amount:
            raise InsufficientFunds(f"Vault holds {custodial.amount}, requested {amount}")

        per_recipient = request.per_recipient

        borrowed_total = self.ledger.record_borrow(
            vault.address, request.borrower, request.mint, amount, payer=request.fee_payer
        )

        signer = self.registry.issue_signer(token_vault)
        for recipient in request.recipients:
            self.token_program.transfer(custodial.address, recipient, per_recipient, signer)

        logger.info(
            "Borrowed and distributed %d tokens (%d to each recipient)", amount, per_recipient
        )

        return {
            'success': True,
            'borrower': request.borrower,
            'fee_payer': request.fee_payer,
            'amount': amount,
            'per_recipient': per_recipient,
            'borrowed_total': borrowed_total,
            'custodial_balance': custodial.amount
        }
