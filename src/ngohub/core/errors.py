"""Error taxonomy shared by services and routers.

Services raise these; routers translate them into HTTP responses. A payment
decline is not an error at the HTTP level, see ``PaymentDeclined``.
"""


class NgoHubError(Exception):
    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class NotFoundError(NgoHubError):
    status_code = 404


class ValidationError(NgoHubError):
    status_code = 400


class ConflictError(NgoHubError):
    status_code = 400


class AuthError(NgoHubError):
    """Missing token (401) or an invalid/expired one (403)."""

    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message)
        self.status_code = status_code


class PermissionDeniedError(NgoHubError):
    status_code = 403


class PaymentDeclined(NgoHubError):
    """The gateway answered but refused the charge.

    Never surfaced as an HTTP error: the donation is marked ``failed`` and the
    response body carries ``success: false``.
    """
    status_code = 200

    def __init__(self, message: str, result=None):
        super().__init__(message)
        self.result = result


class SettlementError(NgoHubError):
    """A settlement stage failed for a reason other than a decline."""

    def __init__(self, stage: str, donation_id: str | None = None):
        super().__init__(f"Donation settlement failed at stage '{stage}'")
        self.stage = stage
        self.donation_id = donation_id
