from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    RATE_LIMITED = "rate_limited"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    TRANSPORT_FAILURE = "transport_failure"


class GitHubApiError(RuntimeError):
    """Raised for any failed call to the GitHub search API.

    The app turns every instance into a 502; ``kind`` says what went wrong
    and the original exception, if any, is chained as ``__cause__``.
    """

    def __init__(self, message: str, kind: ErrorKind, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.kind = kind
        if cause is not None:
            self.__cause__ = cause
