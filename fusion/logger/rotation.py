"""Rotation of log files by size or time, with cleanup of old rotated files."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple, Union

from fusion.logger.compression import CompressionHandler
from fusion.logger.config import RotationConfig, StrategyKind, TimeUnit

PathLike = Union[str, "os.PathLike[str]"]


class RotationManager:
    """Decides when to rotate a log file and performs the rotation."""

    def __init__(self, config: RotationConfig) -> None:
        self.config = config
        self.compression_handler = CompressionHandler(config.compress)
        self.last_rotation_time = datetime.now(timezone.utc)

    def should_rotate(self, current_file_size: int) -> bool:
        """Whether the file should be rotated now, given its current size."""
        strategy = self.config.strategy
        if strategy.kind is StrategyKind.SIZE:
            return current_file_size >= self.config.max_size
        if strategy.kind is StrategyKind.TIME:
            return self._time_elapsed(strategy.unit)
        if strategy.kind is StrategyKind.COUNT:
            # Count-based limits are enforced during cleanup.
            return False
        return current_file_size >= self.config.max_size or self._time_elapsed(
            TimeUnit.DAILY
        )

    def _time_elapsed(self, unit: TimeUnit) -> bool:
        now = datetime.now(timezone.utc)
        period = unit.duration_from(self.last_rotation_time)
        return now - self.last_rotation_time >= period

    def rotate(self, current_path: PathLike) -> Optional[Path]:
        """Move the current file aside, compress it if enabled and prune old files.

        Returns the path the rotated file ended up at, or ``None`` when there
        was no current file to rotate.
        """
        current = Path(current_path)
        rotated: Optional[Path] = None
        if current.exists():
            rotated = self._rotated_path(current)
            os.replace(current, rotated)
            if self.config.compress:
                compressed = self.compression_handler.compress_file(rotated)
                if compressed is not None:
                    rotated = compressed
        self.last_rotation_time = datetime.now(timezone.utc)
        self._cleanup(current, self.config.max_files)
        return rotated

    def force_cleanup(self, base_path: PathLike) -> None:
        """Prune harder than usual, keeping about half of ``max_files``."""
        self._cleanup(Path(base_path), max(self.config.max_files // 2, 1))

    @staticmethod
    def _rotated_path(base: Path) -> Path:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        ext = base.suffix.lstrip(".")
        name = f"{base.stem}.{timestamp}.{ext}" if ext else f"{base.stem}.{timestamp}"
        return base.with_name(name)

    @staticmethod
    def _cleanup(base: Path, max_files: int) -> None:
        parent = base.parent if str(base.parent) else Path(".")
        stem = base.stem
        rotated = [
            entry
            for entry in parent.iterdir()
            if entry.name.startswith(stem) and entry.name != base.name and entry.is_file()
        ]

        def age_key(path: Path) -> Tuple[bool, float]:
            try:
                return (True, path.stat().st_mtime)
            except OSError:
                return (False, 0.0)

        rotated.sort(key=age_key)
        excess = len(rotated) - max_files + 1
        oldest: List[Path] = rotated[:excess] if excess > 0 else []
        for path in oldest:
            path.unlink()