"""
Reactive Engine - Shared Types

Data classes used across the merger, invoker, diff and response stages.
These are the contracts that bind the engine together.

Snapshots and diffs are plain dicts holding only JSON value kinds:
None, bool, int, float, str, list, dict.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

Snapshot = dict[str, Any]


# ---------------------------------------------------------------------------
# Caller identity
# ---------------------------------------------------------------------------


class Caller(Protocol):
    """Read-only view of whoever sent the request."""

    @property
    def is_authenticated(self) -> bool: ...

    def is_in_role(self, role: str) -> bool: ...


@dataclass(frozen=True)
class Principal:
    """Concrete caller identity. Hosts build one per request."""

    subject: str | None = None
    roles: frozenset[str] = field(default_factory=frozenset)
    authenticated: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.authenticated

    def is_in_role(self, role: str) -> bool:
        return role in self.roles


ANONYMOUS = Principal()


# ---------------------------------------------------------------------------
# Action descriptors
# ---------------------------------------------------------------------------


class ParamKind(str, Enum):
    """How a client token is bound to a declared parameter."""

    FILE = "file"
    FILE_LIST = "file_list"
    OBJECT = "object"
    ENUM = "enum"
    SCALAR = "scalar"


@dataclass(frozen=True)
class ParamSpec:
    name: str
    kind: ParamKind
    annotation: Any
    # TypeAdapter for OBJECT / ENUM / SCALAR, None for file kinds
    adapter: Any = None
    # annotation with Optional removed
    target: Any = None
    # declared as `X | None`, a null token binds to None
    optional: bool = False

    @property
    def type_name(self) -> str:
        return getattr(self.annotation, "__name__", None) or repr(self.annotation)


@dataclass(frozen=True)
class ActionDescriptor:
    """Immutable metadata for one client-callable action."""

    name: str
    func: Callable[..., Any]
    params: tuple[ParamSpec, ...] = ()
    authenticated: bool = False
    roles: tuple[str, ...] = ()
