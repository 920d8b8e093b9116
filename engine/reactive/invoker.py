"""
Reactive Engine - Method Resolver & Invoker

Resolves an action by name, enforces its authentication and role policy,
binds client tokens to the declared parameters and calls it.

Order is fixed: resolve, authorize, count, bind, invoke. Nothing reaches the
action body until every argument is bound. Errors raised by the action body
propagate unchanged.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import ValidationError

from engine.reactive.component import ComponentInfo
from engine.reactive.errors import (
    ActionNotFound,
    ArgumentCoercionFailure,
    ArgumentCountMismatch,
    AuthenticationRequired,
    FileNotFound,
    Forbidden,
)
from engine.reactive.types import ActionDescriptor, Caller, ParamKind, ParamSpec
from engine.reactive.uploads import UploadStore
from engine.reactive.viewmodel import ViewModel

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Resolution & authorization
# ---------------------------------------------------------------------------


def resolve(component: ComponentInfo, name: str) -> ActionDescriptor:
    descriptor = component.actions.get(name)
    if descriptor is None:
        raise ActionNotFound(component.name, name)
    return descriptor


def authorize(descriptor: ActionDescriptor, caller: Caller) -> None:
    if descriptor.authenticated and not caller.is_authenticated:
        logger.warning("invoke: %s denied, caller not authenticated", descriptor.name)
        raise AuthenticationRequired(descriptor.name)
    if descriptor.roles and not any(caller.is_in_role(r) for r in descriptor.roles):
        logger.warning("invoke: %s denied, caller lacks roles %s", descriptor.name, descriptor.roles)
        raise Forbidden(descriptor.name, descriptor.roles)


# ---------------------------------------------------------------------------
# Argument binding (one strategy per ParamKind)
# ---------------------------------------------------------------------------


def _field_name(token: Any) -> str:
    if token is None or isinstance(token, (dict, list)):
        raise ValueError("expected an upload field name")
    return str(token)


def _bind_file(param: ParamSpec, token: Any, files: UploadStore) -> Any:
    if token is None and param.optional:
        return None
    name = _field_name(token)
    upload = files.get_file(name)
    if upload is None:
        raise FileNotFound(name)
    return upload


def _bind_file_list(param: ParamSpec, token: Any, files: UploadStore) -> Any:
    if token is None and param.optional:
        return None
    return files.get_files(_field_name(token))


def _bind_object(param: ParamSpec, token: Any, files: UploadStore) -> Any:
    return param.adapter.validate_python(token)


def _bind_enum(param: ParamSpec, token: Any, files: UploadStore) -> Any:
    if not isinstance(token, str):
        # numeric tokens select a member by value
        return param.adapter.validate_python(token)
    enum_type = param.target
    try:
        return enum_type[token]
    except KeyError:
        pass
    if token.strip().lstrip("-").isdigit():
        # numeric strings select a member by value
        return param.adapter.validate_python(int(token))
    raise ValueError(f"`{token}` is not a member of {enum_type.__name__}")


def _bind_scalar(param: ParamSpec, token: Any, files: UploadStore) -> Any:
    return param.adapter.validate_python(token)


_BINDERS: dict[ParamKind, Callable[[ParamSpec, Any, UploadStore], Any]] = {
    ParamKind.FILE: _bind_file,
    ParamKind.FILE_LIST: _bind_file_list,
    ParamKind.OBJECT: _bind_object,
    ParamKind.ENUM: _bind_enum,
    ParamKind.SCALAR: _bind_scalar,
}


def bind_arguments(descriptor: ActionDescriptor, tokens: Sequence[Any], files: UploadStore) -> list[Any]:
    """Convert client tokens to the action's declared parameter types."""
    if len(tokens) != len(descriptor.params):
        raise ArgumentCountMismatch(descriptor.name, len(descriptor.params), len(tokens))

    args: list[Any] = []
    for index, (param, token) in enumerate(zip(descriptor.params, tokens)):
        try:
            args.append(_BINDERS[param.kind](param, token, files))
        except ValidationError as e:
            reason = e.errors()[0]["msg"]
            raise ArgumentCoercionFailure(descriptor.name, index, param.name, param.type_name, reason) from e
        except ValueError as e:
            raise ArgumentCoercionFailure(descriptor.name, index, param.name, param.type_name, str(e)) from e
        logger.debug("invoke: %s bound %s as %s", descriptor.name, param.name, param.kind.value)
    return args


# ---------------------------------------------------------------------------
# Execute
# ---------------------------------------------------------------------------


async def execute(
    component: ComponentInfo,
    name: str,
    vm: ViewModel,
    tokens: Sequence[Any],
    files: UploadStore,
    caller: Caller,
) -> Any:
    """
    Run action `name` against vm. Returns the action's result (None for
    actions without one). Coroutine actions are awaited.
    """
    descriptor = resolve(component, name)
    authorize(descriptor, caller)
    args = bind_arguments(descriptor, tokens, files)

    logger.debug("invoke: %s.%s(%d args)", component.name, name, len(args))
    result = descriptor.func(vm, *args)
    if inspect.isawaitable(result):
        result = await result
    return result
