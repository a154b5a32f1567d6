"""
OilDesk Server - Authentication Exception

Raised by the identity provider when credentials cannot be verified.
"""

from .oildesk_error import OilDeskError

INVALID_CREDENTIALS = "InvalidCredentials"
ACCOUNT_DISABLED = "AccountDisabled"

AUTH_ERROR_MESSAGES = {
    INVALID_CREDENTIALS: "Invalid email or password. Please try again.",
    ACCOUNT_DISABLED: "This account has been disabled. Please contact support.",
}


class AuthError(OilDeskError):
    """Credential verification failed."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(AUTH_ERROR_MESSAGES.get(code, "Failed to login. Please check your credentials and try again."))
