from __future__ import annotations

import contextlib
from typing import Any, Iterator, Optional, Sequence

import psycopg
from psycopg import errors as pg_errors

from .logging import get_logger

logger = get_logger("contactbook.errors")


class ContactBookError(Exception):
    """Base class for every failure surfaced by the contact core."""

    def __init__(self, message: str, *, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class NotFound(ContactBookError):
    def __init__(self, kind: str, identity: Any) -> None:
        super().__init__(f"{kind} not found", detail=f"{kind.lower()} {identity} does not exist")
        self.kind = kind
        self.identity = identity


class Conflict(ContactBookError):
    """A unique constraint rejected a natural key (organization name, association tuple)."""

    def __init__(
        self,
        message: str = "Duplicate entry",
        *,
        constraint: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> None:
        super().__init__(message, detail=detail)
        self.constraint = constraint


class DuplicateAssociation(Conflict):
    def __init__(self, owner_kind: str, owner_id: int, value_kind: str, value_id: int, *, constraint: Optional[str] = None) -> None:
        super().__init__(
            "Duplicate association",
            constraint=constraint,
            detail=f"{value_kind.lower()} {value_id} is already linked to {owner_kind.lower()} {owner_id}",
        )
        self.owner_kind = owner_kind
        self.owner_id = owner_id
        self.value_kind = value_kind
        self.value_id = value_id


class ReferentialIntegrity(ContactBookError):
    def __init__(
        self,
        message: str = "Referenced record does not exist",
        *,
        constraint: Optional[str] = None,
        detail: Optional[str] = None,
    ) -> None:
        super().__init__(message, detail=detail)
        self.constraint = constraint


class ValidationFailure(ContactBookError):
    """Input rejected as malformed; ``errors`` holds ``{"field", "message"}`` items."""

    def __init__(
        self,
        message: str = "Validation Error",
        *,
        errors: Sequence[dict[str, str]] = (),
        detail: Optional[str] = None,
    ) -> None:
        super().__init__(message, detail=detail)
        self.errors = list(errors)


class Internal(ContactBookError):
    pass


def _diag(exc: psycopg.Error) -> tuple[Optional[str], str]:
    diag = exc.diag
    constraint = diag.constraint_name
    detail = diag.message_detail or diag.message_primary or str(exc)
    return constraint, detail


@contextlib.contextmanager
def translate_db_errors() -> Iterator[None]:
    """Re-raise psycopg failures as contact-core failures.

    Domain errors raised inside the block propagate untouched.
    """
    try:
        yield
    except ContactBookError:
        raise
    except pg_errors.UniqueViolation as exc:
        constraint, detail = _diag(exc)
        logger.warning("db_unique_violation", constraint=constraint, detail=detail)
        raise Conflict(constraint=constraint, detail=detail) from exc
    except pg_errors.ForeignKeyViolation as exc:
        constraint, detail = _diag(exc)
        logger.warning("db_foreign_key_violation", constraint=constraint, detail=detail)
        raise ReferentialIntegrity(constraint=constraint, detail=detail) from exc
    except pg_errors.NotNullViolation as exc:
        _, detail = _diag(exc)
        column = exc.diag.column_name
        errors = [{"field": column, "message": "Required field missing"}] if column else []
        raise ValidationFailure("Required field missing", errors=errors, detail=detail) from exc
    except (pg_errors.CheckViolation, pg_errors.InvalidTextRepresentation) as exc:
        _, detail = _diag(exc)
        raise ValidationFailure(detail=detail) from exc
    except psycopg.Error as exc:
        logger.exception("db_error", error=str(exc))
        raise Internal("Database operation failed", detail=str(exc)) from exc


__all__ = [
    "ContactBookError",
    "Conflict",
    "DuplicateAssociation",
    "Internal",
    "NotFound",
    "ReferentialIntegrity",
    "ValidationFailure",
    "translate_db_errors",
]
