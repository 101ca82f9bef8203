from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson
from flask.json.provider import DefaultJSONProvider

DEFAULT_OPTIONS = orjson.OPT_NON_STR_KEYS


def _default(obj: Any) -> Any:
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def dumps(obj: Any, *, indent: bool = False) -> bytes:
    """orjson encoding shared by the API and the command-line tools."""
    option = DEFAULT_OPTIONS | (orjson.OPT_INDENT_2 if indent else 0)
    return orjson.dumps(obj, default=_default, option=option)


class ORJSONProvider(DefaultJSONProvider):
    """Flask JSON provider backed by orjson; dataclasses and paths serialise directly."""

    def dumps(self, obj: Any, **kwargs: Any) -> str:
        return dumps(obj).decode()

    def loads(self, s: str | bytes | bytearray, **kwargs: Any) -> Any:
        return orjson.loads(s)
