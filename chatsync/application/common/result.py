"""
MutationResult - value-or-error outcome of a mutation.

Rollback is a normal branch of the mutation pipeline, so its outcome is
returned rather than raised. Callers that prefer exceptions use unwrap().
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class MutationResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> MutationResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> MutationResult[T]:
        return cls(error=error)

    def unwrap(self) -> Optional[T]:
        """Return the value or raise the error."""
        if self.error is not None:
            raise self.error
        return self.value
