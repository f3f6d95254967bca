from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Iterable, List


def _sep() -> str:
    return ';' if os.name == 'nt' else ':'


_DEFAULT_LOG_LEVEL = "WARNING"
_DEFAULT_HTTP_TIMEOUT = 30.0


def paths_from_env(var: str, defaults: Iterable[Path]) -> List[Path]:
    raw = os.environ.get(var)
    if not raw:
        return [Path(p) for p in defaults]
    sep = _sep()
    return [Path(p.strip()) for p in raw.split(sep) if p.strip()]


def get_search_roots() -> List[Path]:
    """Directories searched by `load` and `require` for relative file names."""
    return paths_from_env('PLUGLISP_PATH', [Path.cwd()])


def get_log_level() -> int:
    name = os.environ.get('PLUGLISP_LOG_LEVEL', _DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def get_http_timeout() -> float:
    raw = os.environ.get('PLUGLISP_HTTP_TIMEOUT')
    if not raw:
        return _DEFAULT_HTTP_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        return _DEFAULT_HTTP_TIMEOUT
