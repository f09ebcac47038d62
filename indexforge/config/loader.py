import json
import tomllib
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import urlsplit

import httpx
import yaml

from .types import ConfigError, IndexConfig, UnsupportedConfigFormatError


def load_config(path: str | Path) -> IndexConfig:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Config file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    raw_file = _parse_file(pure_path, fmt)
    config = _build_index_config(raw_file)
    return config


def default_config() -> IndexConfig:
    return IndexConfig()


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Unsupported config extension: {fmt!r} (expected .yml, .yaml, .toml or .json)"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    match fmt:
        case "yaml":
            return _parse_yaml(path)
        case "toml":
            return _parse_toml(path)
        case "json":
            return _parse_json(path)
        case _:
            raise AssertionError("Unreachable")


def _parse_yaml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML") from exc

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: YAML parsed but the top-level value is not a mapping: {type(raw_file)}"
        )

    return raw_file


def _parse_toml(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: invalid TOML") from exc

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: TOML parsed but the top-level value is not a mapping: {type(raw_file)}"
        )

    return raw_file


def _parse_json(path: Path) -> Mapping[str, Any]:
    try:
        raw_file = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path}: invalid JSON") from exc

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: JSON parsed but the top-level value is not a mapping: {type(raw_file)}"
        )

    return raw_file


def _build_index_config(raw: Mapping[str, Any]) -> IndexConfig:
    keys = {"index_urls", "index_dir", "timeout_s"}
    config = IndexConfig()

    for key in raw.keys():
        if key not in keys:
            raise ConfigError(f"Can't process: {key}")

    if "index_urls" in raw:
        config.index_urls = _build_index_urls(raw["index_urls"])

    if "index_dir" in raw:
        if not isinstance(raw["index_dir"], str):
            raise ConfigError("'index_dir' should be a string")

        if len(raw["index_dir"].strip()) < 1:
            raise ConfigError("'index_dir' can't be empty")

        config.index_dir = Path(raw["index_dir"].strip()).expanduser()

    if "timeout_s" in raw:
        timeout = raw["timeout_s"]
        # bool is an int subclass
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise ConfigError(f"'timeout_s' should be a number, got {type(timeout)}")

        if timeout <= 0:
            raise ConfigError(f"'timeout_s' must be positive, got {timeout}")

        config.timeout_s = float(timeout)

    return config


def _build_index_urls(raw_urls: Any) -> list[str]:
    urls = []

    if not isinstance(raw_urls, list):
        raise ConfigError(f"'index_urls' must be a list, got {type(raw_urls)}")

    if len(raw_urls) < 1:
        raise ConfigError("There must be at least one URL in 'index_urls'")

    for item in raw_urls:
        if not isinstance(item, str):
            raise ConfigError(f"{item} should be a string in 'index_urls'")

        url = item.strip()

        if len(url) < 1:
            raise ConfigError("An index URL is empty")

        try:
            parts = urlsplit(url)
        except ValueError as exc:
            raise ConfigError(f"{url}: invalid URL") from exc

        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ConfigError(f"{url}: expected an absolute http(s) URL")

        _check_host(url)

        # Duplicates are kept, they resolve to the same index file.
        urls.append(url)

    return urls


def _check_host(url: str) -> None:
    try:
        host = httpx.URL(url).host
    except httpx.InvalidURL as exc:
        raise ConfigError(f"{url}: invalid URL") from exc

    if not host:
        raise ConfigError(f"{url}: missing host")

    try:
        # Same codec the resolver uses; rejects empty and over-long labels.
        host.encode("idna")
    except UnicodeError as exc:
        raise ConfigError(f"{url}: invalid host {host!r}") from exc
