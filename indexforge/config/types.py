from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_INDEX_URL = "https://downloads.arduino.cc/packages/package_index.json"
DEFAULT_INDEX_DIR = "~/.indexforge"
DEFAULT_TIMEOUT_S = 30.0


@dataclass
class IndexConfig:
    index_urls: list[str] = field(default_factory=lambda: [DEFAULT_INDEX_URL])
    index_dir: Path = field(
        default_factory=lambda: Path(DEFAULT_INDEX_DIR).expanduser()
    )
    timeout_s: float = DEFAULT_TIMEOUT_S

    def __iter__(self):
        yield from self.index_urls

    def __len__(self):
        return len(self.index_urls)


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)
