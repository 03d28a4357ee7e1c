"""Data models for users."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class User:
    """A stored user; ``password`` holds the password hash."""

    id: int
    username: str
    email: str
    password: str
    created_at: datetime
    updated_at: datetime


@dataclass
class NewUser:
    """Data for creating a user."""

    username: str
    email: str
    password: str


@dataclass
class UpdateUser:
    """Partial update of a user; fields left as None are unchanged."""

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        """The fields that are set, by name."""
        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if getattr(self, item.name) is not None
        }