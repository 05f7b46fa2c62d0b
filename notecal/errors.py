"""Exception types raised by notecal components."""


class NotecalError(Exception):
    """Base error for notecal"""


class TokenAcquisitionError(NotecalError):
    """Obtaining a usable access token failed; fatal to the current call."""


class MissingCredentialsError(TokenAcquisitionError):
    """Client ID or client secret is not configured"""


class AuthorizationFailedError(TokenAcquisitionError):
    """Interactive authorization was abandoned or the code was rejected"""


class TokenRefreshFailedError(TokenAcquisitionError):
    """The provider rejected a refresh-token exchange"""


class EventCreationFailedError(NotecalError):
    """Calendar API did not accept an event insert"""

    def __init__(self, message: str, status: int | None = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body
