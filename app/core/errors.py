"""Closed error taxonomy. Storage and library failures are converted to these where raised."""


class AppError(Exception):
    """Base application error carrying a client-facing message and HTTP status."""

    status_code: int = 500

    def __init__(self, message: str = "Server Error", status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MalformedIdentifierError(AppError):
    """A path or claim identifier could not be parsed."""

    status_code = 400


class DuplicateKeyError(AppError):
    """A unique index rejected the write."""

    status_code = 400

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(message or f"{field} already exists")
        self.field = field


class ValidationError(AppError):
    """One or more fields failed validation. errors maps field -> message, in field order."""

    status_code = 400

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("Validation error")
        self.errors = errors


class TokenError(AppError):
    """Base for token verification failures; catch this to avoid disclosing the cause."""

    status_code = 401


class InvalidTokenError(TokenError):
    """Token is malformed, signed with another key, or missing required claims."""


class ExpiredTokenError(TokenError):
    """Token signature is valid but its expiry has passed."""


class NotAuthorizedError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class InvalidSubjectError(AppError):
    """A token was requested for a user without an id or email."""


def parse_id(value: str | int, name: str = "id") -> int:
    """Parse a path/claim identifier into an int primary key."""
    if isinstance(value, bool):
        raise MalformedIdentifierError(f'Cast to int failed for value "{value}" at path "{name}"')
    if isinstance(value, int):
        return value
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        raise MalformedIdentifierError(
            f'Cast to int failed for value "{value}" at path "{name}"'
        ) from None
    if parsed < 1:
        raise MalformedIdentifierError(f'Cast to int failed for value "{value}" at path "{name}"')
    return parsed
