"""Data models for notification channels, notification logs and webhook settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

JsonValue = Any
"""A decoded JSON document: dicts, lists, strings, numbers, booleans or None."""

_DEFAULT_METHOD = "POST"
_DEFAULT_TIMEOUT_SECONDS = 30
_U64_LIMIT = 2**64


class ChannelType(Enum):
    """Kind of channel a notification is delivered through."""

    WEBHOOK = "webhook"
    EMAIL = "email"
    SMS = "sms"
    DISCORD = "discord"
    SLACK = "slack"


class NotificationStatus(Enum):
    """Delivery state of a notification log entry."""

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
    RETRYING = "retrying"


@dataclass
class NotificationChannel:
    """A stored notification channel."""

    id: int
    user_id: int
    channel_type: ChannelType
    name: str
    config: JsonValue
    enabled: bool
    priority: int
    created_at: datetime
    updated_at: datetime


@dataclass
class NewNotificationChannel:
    """Data for creating a notification channel."""

    user_id: int
    channel_type: ChannelType
    name: str
    config: JsonValue
    enabled: bool
    priority: int


@dataclass
class UpdateNotificationChannel:
    """Partial update of a channel; fields left as None are unchanged."""

    name: Optional[str] = None
    config: Optional[JsonValue] = None
    enabled: Optional[bool] = None
    priority: Optional[int] = None


@dataclass
class NotificationLog:
    """A stored record of one send attempt."""

    id: int
    channel_id: int
    message: str
    status: NotificationStatus
    error_message: Optional[str]
    retry_count: int
    sent_at: datetime


@dataclass
class NewNotificationLog:
    """Data for recording a send attempt."""

    channel_id: int
    message: str
    status: NotificationStatus
    error_message: Optional[str] = None
    retry_count: int = 0


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


def _is_headers(value: Any) -> bool:
    return isinstance(value, Mapping) and all(
        isinstance(key, str) and isinstance(item, str) for key, item in value.items()
    )


def _is_u64(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < _U64_LIMIT


def _take(
    config: Mapping[str, Any],
    name: str,
    default: Callable[[], Any],
    check: Callable[[Any], bool],
    expected: str,
) -> Any:
    if name not in config:
        return default()
    value = config[name]
    if not check(value):
        raise ValueError(f"invalid type for field `{name}`: expected {expected}")
    return value


@dataclass
class WebhookConfig:
    """Settings of a webhook channel, stored as a JSON object."""

    url: str
    method: str = _DEFAULT_METHOD
    headers: Dict[str, str] = field(default_factory=dict)
    timeout_seconds: int = _DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_json(cls, config: JsonValue) -> "WebhookConfig":
        """Read a webhook configuration from a decoded JSON object.

        Missing optional fields take their defaults; unknown fields are ignored.
        Raises ``ValueError`` when the document does not describe a webhook.
        """
        if not isinstance(config, Mapping):
            raise ValueError("invalid type: expected a webhook configuration object")
        if "url" not in config:
            raise ValueError("missing field `url`")
        url = config["url"]
        if not isinstance(url, str):
            raise ValueError("invalid type for field `url`: expected a string")
        method = _take(config, "method", lambda: _DEFAULT_METHOD, _is_str, "a string")
        headers = _take(config, "headers", dict, _is_headers, "a map of strings")
        timeout = _take(
            config,
            "timeout_seconds",
            lambda: _DEFAULT_TIMEOUT_SECONDS,
            _is_u64,
            "a non-negative integer",
        )
        return cls(url=url, method=method, headers=dict(headers), timeout_seconds=timeout)

    def to_json(self) -> Dict[str, Any]:
        """The configuration as a JSON-ready dict."""
        return {
            "url": self.url,
            "method": self.method,
            "headers": dict(self.headers),
            "timeout_seconds": self.timeout_seconds,
        }