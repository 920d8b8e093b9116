"""
Reactive Engine - Response Assembly

The response envelope always has exactly three keys, in order:
  update  - diff mapping (possibly empty)
  script  - client script bundle (possibly empty)
  result  - action return value, or an explicit null
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Protocol

from pydantic_core import to_jsonable_python

from engine.reactive.values import ValueKind, kind_of

logger = logging.getLogger(__name__)

_ENCODER = json.JSONEncoder(ensure_ascii=False, separators=(",", ":"), allow_nan=False)


class TextSink(Protocol):
    def write(self, s: str, /) -> Any: ...


def ensure_encodable(value: Any, path: str = "$") -> None:
    """
    Raise before anything is written if the encoder would fail part way:
    non-finite floats, non-string keys, values outside the JSON kinds.
    """
    kind = kind_of(value)
    if kind is ValueKind.NUMBER and isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Non-finite number at {path}: {value!r}")
    if kind is ValueKind.MAPPING:
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"Unsupported key type at {path}: {type(key).__name__}")
            ensure_encodable(item, f"{path}.{key}")
    elif kind is ValueKind.SEQUENCE:
        for index, item in enumerate(value):
            ensure_encodable(item, f"{path}[{index}]")


def build_envelope(update: dict[str, Any], script: str, result: Any) -> dict[str, Any]:
    return {
        "update": update,
        "script": script,
        "result": None if result is None else to_jsonable_python(result),
    }


class ResponseWriter:
    """
    Single-use envelope writer over a text sink.

    Use as a context manager; the sink is flushed and the writer released on
    exit whether or not the write succeeded. The sink itself stays open, it
    belongs to the host.
    """

    def __init__(self, sink: TextSink) -> None:
        self._sink: TextSink | None = sink
        self._used = False

    def __enter__(self) -> ResponseWriter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def write(self, envelope: dict[str, Any]) -> None:
        if self._sink is None:
            raise RuntimeError("ResponseWriter already released")
        if self._used:
            raise RuntimeError("ResponseWriter can only write one response")
        self._used = True
        ensure_encodable(envelope)

        # stream encoder chunks instead of building the whole body first
        for chunk in _ENCODER.iterencode(envelope):
            self._sink.write(chunk)

    def release(self) -> None:
        if self._sink is None:
            return
        flush = getattr(self._sink, "flush", None)
        self._sink = None
        if flush is not None:
            flush()


def write_response(sink: TextSink, update: dict[str, Any], script: str, result: Any) -> None:
    with ResponseWriter(sink) as out:
        out.write(build_envelope(update, script, result))
    logger.debug("response: wrote %d changed field(s)", len(update))
