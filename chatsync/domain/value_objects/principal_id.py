"""
PrincipalId Value Object - opaque identity of a user on the backend.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PrincipalId:
    value: str  # textual principal, e.g. "2vxsx-fae"

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValueError("PrincipalId cannot be empty")

    def __str__(self) -> str:
        return self.value
