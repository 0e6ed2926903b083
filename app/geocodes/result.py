"""Result types for lookups that can fail without raising.

Usage:
    result = service.parse_reference_date("2023-05-01")
    if isinstance(result, Failure):
        return error_response(result.error)
    reference_date = result.value
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

from app.geocodes.constants import ERROR_FORMAT_DATE_RESOURCE, ERROR_NOT_FOUND_VERSION

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result."""

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result."""

    error: E


Result = Union[Success[T], Failure[E]]


class LookupErrorKind(str, Enum):
    """Request errors surfaced to the caller as a 404 envelope."""

    UNSUPPORTED_VERSION = "UNSUPPORTED_VERSION"
    DATE_FORMAT_ERROR = "DATE_FORMAT_ERROR"

    @property
    def message(self) -> str:
        if self is LookupErrorKind.UNSUPPORTED_VERSION:
            return ERROR_NOT_FOUND_VERSION
        return ERROR_FORMAT_DATE_RESOURCE
