"""Rotating log file writer with recovery strategies for write failures."""

from __future__ import annotations

import errno
import os
import sys
import threading
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Union

from fusion.logger.config import FileConfig
from fusion.logger.rotation import RotationManager

ErrorCallback = Callable[[OSError], None]
"""Called with the error whenever a write to the log file fails."""

_DISK_FULL_ERRNOS = frozenset(
    code for code in (getattr(errno, "ENOSPC", None), getattr(errno, "EDQUOT", None)) if code
)
# Windows: ERROR_DISK_FULL and ERROR_HANDLE_DISK_FULL.
_DISK_FULL_WINERRORS = frozenset({112, 39})


class RecoveryStrategy(Enum):
    """What to do when writing to the log file fails."""

    FALLBACK_TO_CONSOLE = "fallback_to_console"
    CLEANUP_AND_RETRY = "cleanup_and_retry"
    SILENT_DROP = "silent_drop"


def _open_log_file(path: Path, append: bool) -> BinaryIO:
    return open(path, "ab" if append else "wb")


def _file_size(path: Path) -> int:
    try:
        return path.stat().st_size
    except OSError:
        return 0


def _is_disk_space_error(error: OSError) -> bool:
    if error.errno in _DISK_FULL_ERRNOS:
        return True
    return getattr(error, "winerror", None) in _DISK_FULL_WINERRORS


def _write_stderr(payload: bytes) -> int:
    sys.stderr.write(payload.decode("utf-8", errors="replace"))
    return len(payload)


class RotatingFileWriter:
    """Thread-safe binary log file writer that rotates according to its config.

    On a failed write it follows ``recovery_strategy``: fall back to stderr,
    prune old files and retry, or silently drop the data.
    """

    def __init__(
        self,
        config: FileConfig,
        recovery_strategy: RecoveryStrategy = RecoveryStrategy.FALLBACK_TO_CONSOLE,
        error_callback: Optional[ErrorCallback] = None,
    ) -> None:
        self.config = config
        self.path = Path(config.path)
        self.recovery_strategy = recovery_strategy
        self.error_callback = error_callback

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = _open_log_file(self.path, config.append)
        self._current_size = _file_size(self.path) if config.append else 0
        self._rotation = RotationManager(config.rotation)
        self._fallback = False
        self._failures = 0
        self._closed = False
        self._lock = threading.Lock()

    def __enter__(self) -> "RotatingFileWriter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def is_in_fallback_mode(self) -> bool:
        """Whether writes currently go to stderr instead of the file."""
        with self._lock:
            return self._fallback

    def try_recover(self) -> bool:
        """Leave fallback mode by reopening the log file; True on success."""
        with self._lock:
            if not self._fallback or self._closed:
                return False
            try:
                self._reopen(append=True)
            except OSError:
                return False
            self._fallback = False
            return True

    def write(self, data: Union[bytes, bytearray, str]) -> int:
        """Write ``data`` (text is UTF-8 encoded); returns the number of bytes taken."""
        payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        with self._lock:
            if self._closed:
                raise ValueError("I/O operation on closed log writer")
            if self._fallback:
                return _write_stderr(payload)

            if self._rotation.should_rotate(self._current_size):
                try:
                    self._file.flush()
                    self._rotation.rotate(self.path)
                    self._reopen(append=False)
                except OSError as exc:
                    return self._handle_error(payload, exc)

            try:
                written = self._file.write(payload)
            except OSError as exc:
                return self._handle_error(payload, exc)
            self._current_size += written
            self._failures = 0
            return written

    def flush(self) -> None:
        """Flush buffered data to the file, or to stderr in fallback mode."""
        with self._lock:
            if self._closed:
                return
            if self._fallback:
                sys.stderr.flush()
            else:
                self._file.flush()

    def close(self) -> None:
        """Flush and close the file; later writes raise ``ValueError``."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            try:
                self._file.flush()
            finally:
                self._file.close()

    def _reopen(self, append: bool) -> None:
        new_file = _open_log_file(self.path, append)
        try:
            self._file.close()
        except OSError:
            pass
        self._file = new_file
        self._current_size = _file_size(self.path) if append else 0
        self._failures = 0

    def _handle_error(self, payload: bytes, error: OSError) -> int:
        self._failures += 1
        if self.error_callback is not None:
            self.error_callback(error)

        if self.recovery_strategy is RecoveryStrategy.SILENT_DROP:
            return len(payload)

        if self.recovery_strategy is RecoveryStrategy.CLEANUP_AND_RETRY:
            if _is_disk_space_error(error) or self._failures <= 3:
                try:
                    self._rotation.force_cleanup(self.path)
                    self._reopen(append=True)
                    written = self._file.write(payload)
                except OSError:
                    pass
                else:
                    self._current_size += written
                    self._failures = 0
                    return written
            self._fallback = True
            print(
                "[Logger] File write failed after cleanup attempt, "
                f"falling back to stderr: {error}",
                file=sys.stderr,
            )
            return _write_stderr(payload)

        self._fallback = True
        print(f"[Logger] File write failed, falling back to stderr: {error}", file=sys.stderr)
        return _write_stderr(payload)


__all__ = ["ErrorCallback", "RecoveryStrategy", "RotatingFileWriter", "os"]