from .fetch import FetchParams, FetchTask, index_path_from_url, make_fetch_task
from .storage import FileStorage, Storage
from .transport import HttpTransport, Transport

__all__ = [
    "make_fetch_task",
    "FetchTask",
    "FetchParams",
    "index_path_from_url",
    "Storage",
    "FileStorage",
    "Transport",
    "HttpTransport",
]
