"""
Reactive Engine - Component Info

Builds the read-only action table of a ViewModel subclass once, at
registration time. Each action parameter is classified into exactly one
binding kind from its type hint, so request handling dispatches on declared
shape and never probes runtime values.
"""

from __future__ import annotations

import dataclasses
import inspect
import typing
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType, NoneType, UnionType
from typing import Any, get_args, get_origin, get_type_hints, is_typeddict

from pydantic import BaseModel, ConfigDict, TypeAdapter

from engine.reactive.types import ActionDescriptor, ParamKind, ParamSpec
from engine.reactive.uploads import Upload
from engine.reactive.viewmodel import ViewModel

_ACTION_ATTR = "__reactive_action__"

# Scalars accept numbers for string parameters, the way clients send ids
_SCALAR_CONFIG = ConfigDict(coerce_numbers_to_str=True)

_STRUCTURED_ORIGINS = (dict, list, tuple, set, frozenset, Mapping, Sequence)


@dataclass(frozen=True)
class _ActionOptions:
    authenticated: bool = False
    roles: tuple[str, ...] = ()


def action(
    func: Callable[..., Any] | None = None,
    *,
    authenticated: bool = False,
    roles: Sequence[str] = (),
) -> Any:
    """
    Mark a ViewModel method as callable from the client.

    Usage:
        @action
        def increment(self): ...

        @action(authenticated=True, roles=("admin",))
        def reset(self): ...

    A non-empty role set is satisfied by any one of its roles.
    """
    options = _ActionOptions(authenticated=authenticated, roles=tuple(roles))

    def decorate(f: Callable[..., Any]) -> Callable[..., Any]:
        setattr(f, _ACTION_ATTR, options)
        return f

    if func is not None:
        return decorate(func)
    return decorate


# ---------------------------------------------------------------------------
# Parameter classification
# ---------------------------------------------------------------------------


def _unwrap_optional(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is typing.Union or origin is UnionType:
        args = [a for a in get_args(annotation) if a is not NoneType]
        if len(args) == 1:
            return args[0]
    return annotation


def _is_structured(annotation: Any) -> bool:
    if annotation in _STRUCTURED_ORIGINS:
        return True
    if get_origin(annotation) in _STRUCTURED_ORIGINS:
        return True
    if not isinstance(annotation, type):
        return False
    return issubclass(annotation, BaseModel) or dataclasses.is_dataclass(annotation) or is_typeddict(annotation)


def classify(annotation: Any) -> ParamKind:
    """Map a parameter type hint to its binding kind."""
    base = _unwrap_optional(annotation)
    if base is Upload:
        return ParamKind.FILE
    if get_origin(base) in (list, Sequence) and get_args(base) == (Upload,):
        return ParamKind.FILE_LIST

    if isinstance(base, type) and issubclass(base, Enum):
        return ParamKind.ENUM
    if _is_structured(base):
        return ParamKind.OBJECT
    return ParamKind.SCALAR


def _param_spec(name: str, annotation: Any) -> ParamSpec:
    kind = classify(annotation)
    target = _unwrap_optional(annotation)
    if kind in (ParamKind.FILE, ParamKind.FILE_LIST):
        adapter = None
    elif kind is ParamKind.SCALAR:
        adapter = TypeAdapter(annotation, config=_SCALAR_CONFIG)
    else:
        adapter = TypeAdapter(annotation)
    return ParamSpec(
        name=name,
        kind=kind,
        annotation=annotation,
        adapter=adapter,
        target=target,
        optional=target is not annotation,
    )


def describe_action(name: str, func: Callable[..., Any]) -> ActionDescriptor:
    options: _ActionOptions = getattr(func, _ACTION_ATTR, _ActionOptions())
    hints = get_type_hints(func)
    params: list[ParamSpec] = []

    # skip self
    for p in list(inspect.signature(func).parameters.values())[1:]:
        if p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD, p.KEYWORD_ONLY):
            raise ValueError(f"Action `{name}` parameter `{p.name}` must be positional")
        params.append(_param_spec(p.name, hints.get(p.name, Any)))

    return ActionDescriptor(
        name=name,
        func=func,
        params=tuple(params),
        authenticated=options.authenticated,
        roles=options.roles,
    )


# ---------------------------------------------------------------------------
# Component info
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ComponentInfo:
    """A registered component: its ViewModel type and read-only action table."""

    name: str
    view_model: type[ViewModel]
    actions: Mapping[str, ActionDescriptor]

    @classmethod
    def from_view_model(cls, view_model: type[ViewModel], name: str | None = None) -> ComponentInfo:
        if not (isinstance(view_model, type) and issubclass(view_model, ViewModel)):
            raise TypeError(f"{view_model!r} is not a ViewModel subclass")

        actions: dict[str, ActionDescriptor] = {}
        # base classes first so an undecorated override hides the inherited action
        for klass in reversed(view_model.__mro__):
            for attr, member in vars(klass).items():
                if not inspect.isfunction(member):
                    continue
                if hasattr(member, _ACTION_ATTR):
                    actions[attr] = describe_action(attr, member)
                else:
                    actions.pop(attr, None)

        return cls(
            name=name or view_model.__name__,
            view_model=view_model,
            actions=MappingProxyType(actions),
        )

    def create(self) -> ViewModel:
        """Fresh instance with default field values."""
        return self.view_model()
