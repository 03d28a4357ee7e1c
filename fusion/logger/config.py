"""Configuration types for the logger: outputs, formats and rotation."""

from __future__ import annotations

import calendar
import logging
import os
from dataclasses import dataclass, field
from datetime import MAXYEAR, datetime, timedelta
from enum import Enum
from pathlib import Path
from typing import Optional, Union

TRACE = 5
"""Numeric level used for the ``trace`` level name, below ``logging.DEBUG``."""

_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class ConfigError(ValueError):
    """Raised when a logger configuration is invalid."""


class LogFormat(Enum):
    """Format of records written to a log file."""

    FULL = "full"
    COMPACT = "compact"
    JSON = "json"

    @classmethod
    def parse(cls, text: str) -> "LogFormat":
        """Parse a format name, ignoring case."""
        try:
            return cls(text.lower())
        except ValueError:
            raise ConfigError(
                f"Invalid log format '{text}'. Valid formats are: full, compact, json"
            ) from None

    def __str__(self) -> str:
        return self.value


class TimeUnit(Enum):
    """Period of time-based rotation."""

    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    def duration_seconds(self) -> int:
        """Fixed length of the period in seconds; a month counts as 30 days."""
        return {
            TimeUnit.HOURLY: 3600,
            TimeUnit.DAILY: 86400,
            TimeUnit.WEEKLY: 604800,
            TimeUnit.MONTHLY: 30 * 86400,
        }[self]

    def duration_from(self, start: datetime) -> timedelta:
        """Length of the period beginning at ``start``, using real month lengths."""
        if self is TimeUnit.HOURLY:
            return timedelta(hours=1)
        if self is TimeUnit.DAILY:
            return timedelta(days=1)
        if self is TimeUnit.WEEKLY:
            return timedelta(weeks=1)
        next_month = _add_one_month(start)
        if next_month is None:
            return timedelta(days=30)
        return next_month - start


def _add_one_month(start: datetime) -> Optional[datetime]:
    if start.month == 12:
        year, month = start.year + 1, 1
    else:
        year, month = start.year, start.month + 1
    if year > MAXYEAR:
        return None
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


class StrategyKind(Enum):
    """Kinds of rotation strategy."""

    SIZE = "size"
    TIME = "time"
    COUNT = "count"
    COMBINED = "combined"


@dataclass(frozen=True)
class RotationStrategy:
    """When to rotate a log file; time-based strategies carry a period."""

    kind: StrategyKind = StrategyKind.SIZE
    unit: Optional[TimeUnit] = None

    @classmethod
    def size(cls) -> "RotationStrategy":
        return cls(StrategyKind.SIZE)

    @classmethod
    def time(cls, unit: TimeUnit) -> "RotationStrategy":
        return cls(StrategyKind.TIME, unit)

    @classmethod
    def count(cls) -> "RotationStrategy":
        return cls(StrategyKind.COUNT)

    @classmethod
    def combined(cls) -> "RotationStrategy":
        return cls(StrategyKind.COMBINED)

    def validate(self) -> None:
        if self.kind is StrategyKind.TIME and not isinstance(self.unit, TimeUnit):
            raise ConfigError("Time-based rotation requires a time unit")


@dataclass
class RotationConfig:
    """Rotation settings for a log file; ``max_size`` is in bytes."""

    strategy: RotationStrategy = field(default_factory=RotationStrategy.size)
    max_size: int = 10 * 1024 * 1024
    max_files: int = 5
    compress: bool = False

    @classmethod
    def create(
        cls, strategy: RotationStrategy, max_size: int, max_files: int, compress: bool
    ) -> "RotationConfig":
        """Build a rotation configuration and validate it."""
        config = cls(strategy, max_size, max_files, compress)
        config.validate()
        return config

    def validate(self) -> None:
        if self.max_size <= 0:
            raise ConfigError("Maximum file size must be greater than 0")
        if self.max_files <= 0:
            raise ConfigError("Maximum number of files must be greater than 0")
        self.strategy.validate()


@dataclass
class ConsoleConfig:
    """Console output settings."""

    enabled: bool = True
    colored: bool = True

    def validate(self) -> None:
        """Check that both switches are booleans."""
        for name in ("enabled", "colored"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"Console setting '{name}' must be true or false")


@dataclass
class FileConfig:
    """File output settings."""

    enabled: bool = False
    path: Union[str, Path] = field(default_factory=lambda: Path("logs/app.log"))
    append: bool = True
    format: LogFormat = LogFormat.JSON
    rotation: RotationConfig = field(default_factory=RotationConfig)

    @classmethod
    def create(
        cls,
        enabled: bool,
        path: Union[str, Path],
        append: bool,
        format: LogFormat,
        rotation: RotationConfig,
    ) -> "FileConfig":
        """Build a file configuration and validate it."""
        config = cls(enabled, path, append, format, rotation)
        config.validate()
        return config

    def validate(self) -> None:
        """Check the settings without touching the file system."""
        if not self.enabled:
            return
        if not os.fspath(self.path):
            raise ConfigError("File path cannot be empty when file output is enabled")
        try:
            self.rotation.validate()
        except ConfigError as exc:
            raise ConfigError(f"Invalid rotation configuration: {exc}") from exc


@dataclass
class LoggerConfig:
    """Complete logger configuration."""

    console: ConsoleConfig = field(default_factory=ConsoleConfig)
    file: FileConfig = field(default_factory=FileConfig)
    level: str = "info"

    @classmethod
    def create(cls, console: ConsoleConfig, file: FileConfig, level: str) -> "LoggerConfig":
        """Build a logger configuration and validate it."""
        config = cls(console, file, level)
        config.validate()
        return config

    def validate(self) -> None:
        try:
            self.parse_level()
        except ConfigError as exc:
            raise ConfigError(f"Invalid log level: {self.level}: {exc}") from exc
        try:
            self.console.validate()
        except ConfigError as exc:
            raise ConfigError(f"Invalid console configuration: {exc}") from exc
        try:
            self.file.validate()
        except ConfigError as exc:
            raise ConfigError(f"Invalid file configuration: {exc}") from exc
        if not self.console.enabled and not self.file.enabled:
            raise ConfigError("At least one output (console or file) must be enabled")

    def parse_level(self) -> int:
        """Numeric ``logging`` level for the level name, ignoring case."""
        try:
            return _LEVELS[self.level.lower()]
        except KeyError:
            raise ConfigError(
                f"Invalid log level '{self.level}'. "
                "Valid levels are: trace, debug, info, warn, error"
            ) from None

    def update(self, new_config: "LoggerConfig") -> None:
        """Replace this configuration with a validated new one."""
        new_config.validate()
        self.console = new_config.console
        self.file = new_config.file
        self.level = new_config.level


class LoggerConfigBuilder:
    """Chainable builder that validates on ``build``."""

    def __init__(self) -> None:
        self._console = ConsoleConfig()
        self._file = FileConfig()
        self._level = "info"

    def console(self, config: ConsoleConfig) -> "LoggerConfigBuilder":
        self._console = config
        return self

    def file(self, config: FileConfig) -> "LoggerConfigBuilder":
        self._file = config
        return self

    def level(self, level: str) -> "LoggerConfigBuilder":
        self._level = str(level)
        return self

    def build(self) -> LoggerConfig:
        return LoggerConfig.create(self._console, self._file, self._level)