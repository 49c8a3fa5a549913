"""Scratch storage for temporary files handed to external tools."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator
from uuid import uuid4

logger = logging.getLogger(__name__)


class ScratchStorage:
    """Hands out uniquely named files under a root directory.

    Every path obtained from :meth:`reserve` is removed when the ``with`` block
    exits, whether it exits normally or through an exception.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def path_for(self, suffix: str = "") -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root / f"{uuid4().hex}{suffix}"

    @contextmanager
    def reserve(self, suffix: str = "", data: bytes | None = None) -> Iterator[Path]:
        path = self.path_for(suffix)
        try:
            if data is not None:
                path.write_bytes(data)
            yield path
        finally:
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:  # pragma: no cover - best effort on locked files
                logger.warning("Could not remove scratch file %s: %s", path, exc)
