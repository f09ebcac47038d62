from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from indexforge.task import StorageError

logger = logging.getLogger(__name__)


class Storage(Protocol):
    def write(self, path: Path, data: bytes) -> None: ...


class FileStorage:
    def write(self, path: Path, data: bytes) -> None:
        path = Path(path)
        tmp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            # Temp file in the target dir so os.replace stays on one filesystem.
            with tempfile.NamedTemporaryFile(
                dir=path.parent, prefix=f".{path.name}.", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(data)
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name is not None:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(tmp_name)
            raise StorageError(path, exc.strerror or str(exc)) from exc

        logger.debug("Wrote %d bytes to %s", len(data), path)
