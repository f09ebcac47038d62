# tests/test_fetch.py
from __future__ import annotations

import io
from pathlib import Path

import httpx
import pytest

from indexforge.formatter import Printer
from indexforge.index import (
    FetchTask,
    FileStorage,
    HttpTransport,
    index_path_from_url,
    make_fetch_task,
)
from indexforge.task import (
    NetworkError,
    StorageError,
    TaskMessages,
    execute_sequence,
    wrap_task,
)

URL_A = "https://a.example.test/package_a_index.json"
URL_B = "https://b.example.test/package_b_index.json"
URL_C = "https://c.example.test/package_c_index.json"


class FakeTransport:
    """Serves fixed bodies; URLs in `failing` raise NetworkError."""

    def __init__(self, bodies: dict[str, bytes], failing: set[str] = frozenset()):
        self.bodies = bodies
        self.failing = failing
        self.calls: list[str] = []

    def fetch(self, url: str) -> bytes:
        self.calls.append(url)
        if url in self.failing:
            raise NetworkError(url, "connection refused")
        return self.bodies[url]


class FailingStorage:
    def __init__(self) -> None:
        self.calls: list[Path] = []

    def write(self, path: Path, data: bytes) -> None:
        self.calls.append(path)
        raise StorageError(path, "No space left on device")


# -------------------------
# Path resolution
# -------------------------


def test_path_resolution_is_deterministic(tmp_path: Path) -> None:
    assert index_path_from_url(URL_A, tmp_path) == index_path_from_url(URL_A, tmp_path)


def test_path_keeps_basename_inside_index_dir(tmp_path: Path) -> None:
    path = index_path_from_url(URL_A, tmp_path)
    assert path.parent == tmp_path
    assert path.name.endswith("-package_a_index.json")


def test_same_basename_different_urls_get_different_paths(tmp_path: Path) -> None:
    one = index_path_from_url("https://one.test/package_index.json", tmp_path)
    two = index_path_from_url("https://two.test/package_index.json", tmp_path)
    assert one != two


def test_url_without_path_gets_default_name(tmp_path: Path) -> None:
    path = index_path_from_url("https://example.test", tmp_path)
    assert path.name.endswith("-index.json")


def test_factory_binds_url_and_resolved_path(tmp_path: Path) -> None:
    task = make_fetch_task(
        URL_A, index_dir=tmp_path, transport=FakeTransport({}), storage=FileStorage()
    )
    assert isinstance(task, FetchTask)
    assert task.params.url == URL_A
    assert task.params.path == index_path_from_url(URL_A, tmp_path)


# -------------------------
# Fetch task outcomes
# -------------------------


def test_fetch_task_writes_index(tmp_path: Path) -> None:
    transport = FakeTransport({URL_A: b'{"packages": []}'})
    task = make_fetch_task(
        URL_A, index_dir=tmp_path / "idx", transport=transport, storage=FileStorage()
    )

    outcome = task()

    assert outcome.ok
    assert task.params.path.read_bytes() == b'{"packages": []}'


def test_network_failure_skips_write(tmp_path: Path) -> None:
    storage = FailingStorage()
    task = make_fetch_task(
        URL_B,
        index_dir=tmp_path,
        transport=FakeTransport({}, failing={URL_B}),
        storage=storage,
    )

    outcome = task()

    assert isinstance(outcome.error, NetworkError)
    assert storage.calls == []


def test_storage_failure_is_distinguished_from_network(tmp_path: Path) -> None:
    task = make_fetch_task(
        URL_A,
        index_dir=tmp_path,
        transport=FakeTransport({URL_A: b"{}"}),
        storage=FailingStorage(),
    )

    outcome = task()

    assert isinstance(outcome.error, StorageError)
    assert not isinstance(outcome.error, NetworkError)


def test_three_sources_with_middle_network_failure(tmp_path: Path) -> None:
    out, err = io.StringIO(), io.StringIO()
    printer = Printer(out=out, err=err)
    transport = FakeTransport({URL_A: b"a", URL_C: b"c"}, failing={URL_B})
    storage = FileStorage()

    tasks = []
    for url in [URL_A, URL_B, URL_C]:
        msgs = TaskMessages(before=f"Downloading {url}", error="Can't download")
        task = make_fetch_task(
            url, index_dir=tmp_path, transport=transport, storage=storage
        )
        tasks.append(wrap_task(task, msgs, printer))

    report = execute_sequence(tasks, [False, False, False], printer=printer)

    assert [o.ok for o in report] == [True, False, True]
    assert isinstance(report[1].error, NetworkError)
    assert report.failed
    assert transport.calls == [URL_A, URL_B, URL_C]
    assert out.getvalue().splitlines() == [
        f"Downloading {URL_A}",
        f"Downloading {URL_B}",
        f"Downloading {URL_C}",
    ]
    error_lines = [
        line for line in err.getvalue().splitlines() if line.startswith("Error: ")
    ]
    assert len(error_lines) == 1
    assert URL_B in error_lines[0]
    assert index_path_from_url(URL_A, tmp_path).read_bytes() == b"a"
    assert index_path_from_url(URL_C, tmp_path).read_bytes() == b"c"
    assert not index_path_from_url(URL_B, tmp_path).exists()


def test_duplicate_url_resolves_to_same_path_and_overwrites(tmp_path: Path) -> None:
    bodies = iter([b"first", b"second"])

    class Sequenced:
        def fetch(self, url: str) -> bytes:
            return next(bodies)

    transport = Sequenced()
    tasks = [
        make_fetch_task(URL_A, index_dir=tmp_path, transport=transport, storage=FileStorage())
        for _ in range(2)
    ]

    report = execute_sequence(tasks, [False, False])

    assert tasks[0].params.path == tasks[1].params.path
    assert len(report) == 2
    assert all(o.ok for o in report)
    assert tasks[0].params.path.read_bytes() == b"second"


# -------------------------
# Storage
# -------------------------


def test_storage_creates_parents_and_overwrites(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "index.json"
    storage = FileStorage()

    storage.write(target, b"old")
    storage.write(target, b"new")

    assert target.read_bytes() == b"new"
    assert sorted(p.name for p in target.parent.iterdir()) == ["index.json"]


def test_storage_parent_is_file_raises_storage_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(StorageError) as exc_info:
        FileStorage().write(blocker / "index.json", b"data")

    assert exc_info.value.path == blocker / "index.json"


def test_storage_failed_replace_leaves_no_temp_file(tmp_path: Path) -> None:
    target = tmp_path / "index.json"
    target.mkdir()

    with pytest.raises(StorageError):
        FileStorage().write(target, b"data")

    assert [p.name for p in tmp_path.iterdir()] == ["index.json"]
    assert target.is_dir()


# -------------------------
# HTTP transport
# -------------------------


def _http(handler) -> HttpTransport:
    return HttpTransport(transport=httpx.MockTransport(handler))


def test_http_transport_returns_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["User-Agent"].startswith("indexforge/")
        return httpx.Response(200, content=b'{"packages": []}')

    with _http(handler) as transport:
        assert transport.fetch(URL_A) == b'{"packages": []}'


@pytest.mark.parametrize("status", [404, 500, 503])
def test_http_transport_non_success_status_raises(status: int) -> None:
    with _http(lambda request: httpx.Response(status)) as transport:
        with pytest.raises(NetworkError) as exc_info:
            transport.fetch(URL_A)

    assert exc_info.value.reason == f"HTTP {status}"
    assert exc_info.value.url == URL_A


def test_http_transport_connect_error_raises_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _http(handler) as transport:
        with pytest.raises(NetworkError) as exc_info:
            transport.fetch(URL_A)

    assert "connection refused" in exc_info.value.reason


def test_http_transport_timeout_raises_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    with _http(handler) as transport:
        with pytest.raises(NetworkError) as exc_info:
            transport.fetch(URL_A)

    assert exc_info.value.reason == "timeout"


def test_http_transport_follows_redirects() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old.json":
            return httpx.Response(301, headers={"Location": URL_A})
        return httpx.Response(200, content=b"moved")

    with _http(handler) as transport:
        assert transport.fetch("https://a.example.test/old.json") == b"moved"


def test_http_transport_invalid_url_raises_network_error() -> None:
    with _http(lambda request: httpx.Response(200)) as transport:
        with pytest.raises(NetworkError) as exc_info:
            transport.fetch("https://\x00.test/i.json")

    assert exc_info.value.reason.startswith("invalid URL")


def test_http_transport_idna_failure_raises_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        # What the resolver raises for a host such as `a..b`.
        raise UnicodeError("encoding with 'idna' codec failed (label empty or too long)")

    with _http(handler) as transport:
        with pytest.raises(NetworkError) as exc_info:
            transport.fetch("https://a..b/i.json")

    assert exc_info.value.reason.startswith("invalid host")


def test_unusable_url_fails_its_task_and_sequence_continues(tmp_path: Path) -> None:
    out, err = io.StringIO(), io.StringIO()
    printer = Printer(out=out, err=err)
    bad_url = "https://\x00.test/i.json"

    with _http(lambda request: httpx.Response(200, content=b"ok")) as transport:
        tasks = [
            wrap_task(
                make_fetch_task(
                    url, index_dir=tmp_path, transport=transport, storage=FileStorage()
                ),
                TaskMessages(before=f"Downloading {url!r}", error="Can't download"),
                printer,
            )
            for url in [bad_url, URL_A]
        ]
        report = execute_sequence(tasks, [True, True], printer=printer)

    assert isinstance(report[0].error, NetworkError)
    assert report[1].ok
    assert index_path_from_url(URL_A, tmp_path).read_bytes() == b"ok"
    assert err.getvalue().startswith("Error: Can't download: ")
