from typing import NoReturn, Optional, Sequence

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError

# PostgreSQL SQLSTATE codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
CHECK_VIOLATION = "23514"

_SQLITE_ERROR_NAMES = {
    "SQLITE_CONSTRAINT_UNIQUE": UNIQUE_VIOLATION,
    "SQLITE_CONSTRAINT_PRIMARYKEY": UNIQUE_VIOLATION,
    "SQLITE_CONSTRAINT_FOREIGNKEY": FOREIGN_KEY_VIOLATION,
    "SQLITE_CONSTRAINT_CHECK": CHECK_VIOLATION,
}

_SQLITE_MESSAGES = (
    ("UNIQUE constraint failed", UNIQUE_VIOLATION),
    ("FOREIGN KEY constraint failed", FOREIGN_KEY_VIOLATION),
    ("CHECK constraint failed", CHECK_VIOLATION),
)


class APIError(HTTPException):
    """Base for errors raised deliberately by the API"""


class BadRequest(APIError):
    """Exception raised when input fails validation or a business rule"""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail
        )


class NotFound(APIError):
    """Exception raised when a resource (or a referenced resource) is missing"""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail
        )


class Conflict(APIError):
    """Exception raised when a unique constraint would be violated"""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail
        )


def integrity_error_code(exc: IntegrityError) -> Optional[str]:
    """
    Extract the SQLSTATE-style code from a driver integrity error.
    asyncpg exposes `sqlstate`, psycopg `pgcode`, sqlite3 `sqlite_errorname`.
    """
    orig = exc.orig
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if candidate is None:
            continue
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return code
        name = getattr(candidate, "sqlite_errorname", None)
        if name in _SQLITE_ERROR_NAMES:
            return _SQLITE_ERROR_NAMES[name]

    message = str(orig)
    for marker, code in _SQLITE_MESSAGES:
        if marker in message:
            return code
    return None


def raise_for_integrity_error(
    exc: IntegrityError,
    not_found: Optional[str] = None,
    conflict: Optional[str] = None,
) -> NoReturn:
    """Re-raise a database integrity error as the matching API error."""
    code = integrity_error_code(exc)

    if code == UNIQUE_VIOLATION and conflict:
        raise Conflict(conflict) from exc
    if code == FOREIGN_KEY_VIOLATION and not_found:
        raise NotFound(not_found) from exc
    if code == CHECK_VIOLATION:
        raise BadRequest("Constraint violated") from exc
    raise exc


def format_validation_errors(errors: Sequence[dict]) -> str:
    """Render the first pydantic error as `field: message`."""
    if not errors:
        return "Invalid request"
    error = errors[0]
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    message = error.get("msg", "Invalid value")
    if location:
        return f"{'.'.join(location)}: {message}"
    return message
