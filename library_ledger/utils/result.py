"""Discriminated results returned by the ledger and catalog services.

Expected business outcomes (a missing id, no free copy, a loan that was
already returned) are values, not exceptions: every service call hands
back a :class:`Result` holding either ``value`` or ``error``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    OUT_OF_STOCK = "out_of_stock"
    ALREADY_RETURNED = "already_returned"
    CONSISTENCY_VIOLATION = "consistency_violation"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    INVALID_ARGUMENT = "invalid_argument"


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class Result:
    value: Any = None
    error: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any = None) -> "Result":
        return cls(value=value)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> "Result":
        return cls(error=Failure(kind=kind, message=message))
