"""Notification provider interface and its message and result types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


class ConfigValidationError(ValueError):
    """A provider setting failed validation."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Validation failed for {field}: {reason}")
        self.field = field
        self.reason = reason


@dataclass
class NotificationMessage:
    """A message to deliver; ``title`` is optional for some providers."""

    body: str
    title: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """The message as a JSON-ready dict."""
        return {"title": self.title, "body": self.body, "metadata": dict(self.metadata)}


@dataclass
class NotificationResult:
    """Outcome of a send attempt."""

    success: bool
    status_code: Optional[int]
    response: Optional[str]
    duration_ms: int


class NotificationProvider(ABC):
    """A way of delivering notifications, such as a webhook."""

    @abstractmethod
    def send(self, message: NotificationMessage) -> NotificationResult:
        """Deliver ``message`` and report how it went."""

    @abstractmethod
    def name(self) -> str:
        """Short name identifying the provider."""

    def validate_config(self) -> None:
        """Check the provider's settings; raises ``ConfigValidationError``."""
        return None