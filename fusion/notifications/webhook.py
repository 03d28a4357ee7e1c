"""Webhook notification provider sending messages as JSON over HTTP."""

from __future__ import annotations

import json
import time
import urllib.error
import urllib.request
from typing import Optional
from urllib.parse import urlsplit

from fusion.models.notification import WebhookConfig
from fusion.notifications.provider import (
    ConfigValidationError,
    NotificationMessage,
    NotificationProvider,
    NotificationResult,
)

_TOKEN_CHARS = frozenset(
    "!#$%&'*+-.^_`|~0123456789"
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
)
_SPECIAL_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})
_FORBIDDEN_HOST_CHARS = frozenset(" \t\n\r#%/:<>?@[\\]^|")


def _read_text(response) -> Optional[str]:
    try:
        return response.read().decode("utf-8", errors="replace")
    except OSError:
        return None


def _url_is_valid(url: str) -> bool:
    try:
        parts = urlsplit(url.strip(" \x00\x01\x02\x03\x04\x05\x06\x07\x08\t\n\x0b\x0c\r"))
        parts.port
    except ValueError:
        return False
    if not parts.scheme:
        return False
    if parts.scheme in _SPECIAL_SCHEMES:
        host = parts.hostname
        if not host:
            return False
        if parts.netloc.rsplit("@", 1)[-1].startswith("["):
            return True
        if any(char in _FORBIDDEN_HOST_CHARS for char in host):
            return False
    return True


class WebhookProvider(NotificationProvider):
    """Delivers notifications by calling a configured webhook URL."""

    def __init__(self, config: WebhookConfig) -> None:
        self.config = config

    def _parse_method(self) -> str:
        method = self.config.method
        if not method or any(char not in _TOKEN_CHARS for char in method):
            raise ConfigValidationError("method", f"Invalid HTTP method: {method}")
        return method

    def send(self, message: NotificationMessage) -> NotificationResult:
        """Send ``message`` as JSON; transport failures become a failed result.

        Raises ``ConfigValidationError`` when the configured method is invalid.
        """
        start = time.monotonic()
        method = self._parse_method()
        payload = json.dumps(message.to_dict()).encode("utf-8")

        def elapsed_ms() -> int:
            return int((time.monotonic() - start) * 1000)

        try:
            request = urllib.request.Request(
                self.config.url,
                data=payload,
                method=method,
                headers={"Content-Type": "application/json"},
            )
            for key, value in self.config.headers.items():
                request.add_header(key, value)
            with urllib.request.urlopen(request, timeout=self.config.timeout_seconds) as response:
                status = response.status
                text = _read_text(response)
        except urllib.error.HTTPError as exc:
            status = exc.code
            text = _read_text(exc)
            exc.close()
        except (OSError, ValueError) as exc:
            return NotificationResult(
                success=False, status_code=None, response=str(exc), duration_ms=elapsed_ms()
            )
        return NotificationResult(
            success=200 <= status < 300,
            status_code=status,
            response=text,
            duration_ms=elapsed_ms(),
        )

    def name(self) -> str:
        return "webhook"

    def validate_config(self) -> None:
        """Require a well-formed HTTPS URL and a valid HTTP method."""
        if not _url_is_valid(self.config.url):
            raise ConfigValidationError("url", "Invalid URL format")
        if urlsplit(self.config.url.strip()).scheme != "https":
            raise ConfigValidationError("url", "Only HTTPS URLs are allowed")
        self._parse_method()