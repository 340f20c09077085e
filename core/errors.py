from typing import Optional


# Postmark error codes that mean the request body itself was malformed
VALIDATION_ERROR_CODES = {300, 402, 403, 1109, 1120, 1121, 1122, 1123}

# "Template not found" / "Template alias not valid"
TEMPLATE_NOT_FOUND_CODE = 1101


class PostmarkError(Exception):
    """Base error for every failed Postmark call"""

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        status_code: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code

    def __str__(self) -> str:
        if self.error_code is not None:
            return f"[{self.error_code}] {self.message}"
        return self.message


class PostmarkTransportError(PostmarkError):
    """The call itself failed: network error, timeout or unreadable response"""


class PostmarkApiError(PostmarkError):
    """Postmark answered with an error envelope (ErrorCode + Message)"""


class PostmarkNotFoundError(PostmarkApiError):
    """Template id or alias does not resolve for this server"""


class PostmarkValidationError(PostmarkApiError):
    """Request was malformed or failed a local argument check"""


class PostmarkRejectionError(PostmarkApiError):
    """Postmark understood the request but refused it"""


def error_from_envelope(status_code: int, error_code: int, message: str) -> PostmarkApiError:
    """
    Map an error envelope onto the matching error class

    Args:
        status_code: HTTP status of the response
        error_code: Postmark ErrorCode from the body
        message: Postmark Message from the body

    Returns:
        The error instance to raise
    """
    if status_code == 404 or error_code == TEMPLATE_NOT_FOUND_CODE:
        error_class = PostmarkNotFoundError
    elif error_code in VALIDATION_ERROR_CODES:
        error_class = PostmarkValidationError
    else:
        error_class = PostmarkRejectionError
    return error_class(message, error_code=error_code, status_code=status_code)
