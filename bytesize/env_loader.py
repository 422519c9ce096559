from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Dict

from bytesize.errors import InvalidSize
from bytesize.size_parser import parse_size

LOGGER = logging.getLogger(__name__)

# Variables holding byte sizes; checked when an env file is loaded.
SIZE_VARIABLES = ("BYTESIZE_LOG_MAX_BYTES",)

_ENV_LINE = re.compile(r"(?:export\s+)?(?P<key>[A-Za-z_][A-Za-z0-9_]*)\s*=\s*(?P<value>.*)")


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def read_env_file(path: Path) -> Dict[str, str]:
    """Return the KEY=VALUE pairs of a dotenv-style file, skipping comments and malformed lines."""
    pairs: Dict[str, str] = {}
    for lineno, raw_line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        text = raw_line.strip()
        if not text or text.startswith("#"):
            continue
        match = _ENV_LINE.fullmatch(text)
        if not match:
            LOGGER.debug("Skipping env line path=%s line=%s", path, lineno, extra={"category": "CONFIG"})
            continue
        pairs[match.group("key")] = _unquote(match.group("value").strip())
    return pairs


def load_env_file(path: Path, override: bool = False) -> Dict[str, str]:
    """
    Copy the pairs of an env file into os.environ and return the ones applied.

    Existing variables win unless override is set. Size variables are parsed
    before anything is applied, so a bad file leaves the environment untouched.
    """
    if not path.exists():
        LOGGER.debug("Env file not found path=%s", path, extra={"category": "CONFIG"})
        return {}
    pairs = read_env_file(path)
    for key in SIZE_VARIABLES:
        if key in pairs:
            _parse_named_size(key, pairs[key])

    applied = {key: value for key, value in pairs.items() if override or key not in os.environ}
    os.environ.update(applied)
    LOGGER.info("Loaded env file path=%s keys=%s", path, sorted(applied), extra={"category": "CONFIG"})
    return applied


def _parse_named_size(name: str, raw: str) -> int:
    try:
        return parse_size(raw)
    except InvalidSize as exc:
        LOGGER.error("Invalid size in environment name=%s value=%r", name, raw, extra={"category": "ERRORS"})
        raise InvalidSize(raw, f"invalid size for {name}: {raw}") from exc


def size_from_env(name: str, default: int) -> int:
    """Read a size such as "200MB" from the environment; blank means default."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return _parse_named_size(name, raw)
