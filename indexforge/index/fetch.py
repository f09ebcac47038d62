from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from urllib.parse import urlsplit

from indexforge.task import Outcome, TaskError

from .storage import Storage
from .transport import Transport

DEFAULT_INDEX_NAME = "index.json"


@dataclass(frozen=True)
class FetchParams:
    url: str
    path: Path


@dataclass(frozen=True)
class FetchTask:
    params: FetchParams
    transport: Transport
    storage: Storage

    def __call__(self) -> Outcome:
        try:
            data = self.transport.fetch(self.params.url)
            self.storage.write(self.params.path, data)
        except TaskError as exc:
            return Outcome.failure(exc)
        return Outcome.success()


def index_path_from_url(url: str, index_dir: Path) -> Path:
    """
    Map a source URL to the local file its index is stored in.

    The file is named `<sha256(url)[:12]>-<basename>`: the digest keeps URLs
    sharing a basename apart, the basename keeps the directory readable.
    """
    name = PurePosixPath(urlsplit(url).path).name or DEFAULT_INDEX_NAME
    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:12]
    return Path(index_dir) / f"{digest}-{name}"


def make_fetch_task(
    url: str, *, index_dir: Path, transport: Transport, storage: Storage
) -> FetchTask:
    params = FetchParams(url, index_path_from_url(url, index_dir))
    return FetchTask(params, transport, storage)
