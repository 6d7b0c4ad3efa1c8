from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class User:
    """Represents an authenticated actor within the system."""

    user_id: str
    email: str = ""
    role: str = "user"
    first_name: str = ""
    last_name: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True, slots=True)
class CategoryDefinition:
    """A known error category with its dashboard colour."""

    name: str
    description: str
    color: str
