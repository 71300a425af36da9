"""Outcome type returned by every taskboard operation."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class Outcome(str, Enum):
    OK = "ok"
    NOOP = "noop"  # nothing changed: stale expected_status, unconfirmed delete, empty update
    NOT_FOUND = "not_found"
    INVALID = "invalid"  # business-rule rejection
    CORRUPT = "corrupt"  # stored data the operation needs could not be parsed


FAILURES = frozenset({Outcome.INVALID, Outcome.CORRUPT})


class OperationResult(BaseModel):
    """
    Result of one operation: an outcome, a human-readable message and an
    optional payload (a new ID, a record, a list of records).

    Only ``invalid`` and ``corrupt`` are failures. Missing records, stale
    optimistic locks and unconfirmed deletes are ordinary outcomes.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    outcome: Outcome
    message: str = ""
    data: Any = None

    @property
    def is_error(self) -> bool:
        return self.outcome in FAILURES

    @classmethod
    def ok(cls, message: str = "", data: Any = None) -> OperationResult:
        return cls(outcome=Outcome.OK, message=message, data=data)

    @classmethod
    def noop(cls, message: str) -> OperationResult:
        return cls(outcome=Outcome.NOOP, message=message)

    @classmethod
    def not_found(cls, message: str) -> OperationResult:
        return cls(outcome=Outcome.NOT_FOUND, message=message)

    @classmethod
    def invalid(cls, message: str) -> OperationResult:
        return cls(outcome=Outcome.INVALID, message=message)

    @classmethod
    def corrupt(cls, message: str) -> OperationResult:
        return cls(outcome=Outcome.CORRUPT, message=message)
