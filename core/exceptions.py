# core/exceptions.py
"""
Failures raised by the contract, payment and wallet services.

Routers map each family to a status code:

    NothingToPay        -> 204 No Content
    PreconditionFailed  -> 412 Precondition Failed
    BadRequest          -> 400 Bad Request

A failed or errored payment attempt is not an exception; it is returned as
data by the payment service.
"""


class FinanceError(Exception):
    """Base class for all service-level failures."""

    code: str = "FINANCE_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# ------------------------
# NotFound-as-empty
# ------------------------
class NothingToPay(FinanceError):
    """Project, contract or invoice is absent on the pay path."""

    code = "NOTHING_TO_PAY"


# ------------------------
# PreconditionFailed
# ------------------------
class PreconditionFailed(FinanceError):
    code = "PRECONDITION_FAILED"


class ContractCreationFailed(PreconditionFailed):
    """Project is absent or the store refused the new contract."""

    code = "CONTRACT_CREATION_FAILED"


class NoActiveWallet(PreconditionFailed):
    code = "NO_ACTIVE_WALLET"

    def __init__(self, repo_full_name: str):
        self.repo_full_name = repo_full_name
        super().__init__(f"Project {repo_full_name} has no active wallet.")


# ------------------------
# BadRequest
# ------------------------
class BadRequest(FinanceError):
    code = "BAD_REQUEST"


class WalletOperationFailed(BadRequest):
    """Unsupported wallet type, or project/wallet absent."""

    code = "WALLET_OPERATION_FAILED"


class WalletAlreadyExists(BadRequest):
    """A wallet of this type already exists for the project."""

    code = "WALLET_ALREADY_EXISTS"

    def __init__(self, repo_full_name: str, wallet_type: str):
        self.repo_full_name = repo_full_name
        self.wallet_type = wallet_type
        super().__init__(
            f"Project {repo_full_name} already has a {wallet_type} wallet."
        )
