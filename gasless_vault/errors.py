"""
Error kinds raised by the vault program and by the host runtime
"""


class VaultError(Exception):
    """Base class for failures reported by the vault program itself"""

    code = 6000
    msg = "Vault error"

    def __init__(self, detail: str = None):
        self.detail = detail
        super().__init__(f"{self.msg}: {detail}" if detail else self.msg)


class Unauthorized(VaultError):
    code = 6000
    msg = "Unauthorized access"


class InvalidTokenAccount(VaultError):
    code = 6001
    msg = "Invalid token account"


class NotWhitelisted(VaultError):
    code = 6002
    msg = "Address not whitelisted"


class InsufficientFunds(VaultError):
    code = 6003
    msg = "Insufficient funds in vault"


class InvalidAmount(VaultError):
    code = 6004
    msg = "Amount must be greater than zero"


class MathOverflow(VaultError):
    code = 6005
    msg = "Math overflow"


class InvalidRecipient(VaultError):
    code = 6006
    msg = "Invalid recipient"


class InvalidDistributionAmount(VaultError):
    code = 6007
    msg = "Distribution amount must be divisible by 3"


# Host runtime failures. The program surfaces these unchanged.

class AccountError(Exception):
    """Persistent-record allocator failure"""


class AccountAlreadyInUse(AccountError):
    pass


class AccountNotFound(AccountError):
    pass


class AccountTypeMismatch(AccountError):
    pass


class CapacityExceeded(AccountError):
    pass


class TokenError(Exception):
    """Balance-transfer primitive failure"""


class TokenOwnerMismatch(TokenError):
    pass


class TokenMintMismatch(TokenError):
    pass


class InsufficientTokenBalance(TokenError):
    pass


class TokenAmountOverflow(TokenError):
    pass


class SignatureError(Exception):
    pass


class InvalidSignature(SignatureError):
    pass


class SignatureReplayed(SignatureError):
    """A signed instruction was submitted more than once"""
