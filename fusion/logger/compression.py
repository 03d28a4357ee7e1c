"""Gzip compression of rotated log files."""

from __future__ import annotations

import gzip
import os
import shutil
from pathlib import Path
from typing import Optional, Union


class CompressionHandler:
    """Compresses files with gzip when enabled."""

    def __init__(self, enabled: bool) -> None:
        self.enabled = enabled

    def compress_file(self, file_path: Union[str, os.PathLike]) -> Optional[Path]:
        """Gzip ``file_path`` to ``<name>.gz`` and delete the original.

        Returns the compressed path, or ``None`` when compression is disabled.
        """
        if not self.enabled:
            return None
        source = Path(file_path)
        target = source.with_name(source.name + ".gz")
        with source.open("rb") as reader, gzip.open(target, "wb") as writer:
            shutil.copyfileobj(reader, writer)
        source.unlink()
        return target