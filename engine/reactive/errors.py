"""
Reactive Engine - Errors

Every failure the update pipeline raises on purpose derives from UpdateError
and carries the status code the host should answer with. Errors raised by an
action body are not part of this hierarchy; they propagate unchanged.
"""

from __future__ import annotations

from typing import Any


class UpdateError(Exception):
    """Base class for status-coded update failures."""

    status_code: int = 400

    def to_dict(self) -> dict[str, Any]:
        return {"error": type(self).__name__, "detail": str(self)}


class InvalidPayload(UpdateError):
    """Client-sent state or parameter list could not be decoded."""

    status_code = 400


class ActionNotFound(UpdateError):
    """Requested action is not in the component's action table."""

    status_code = 404

    def __init__(self, component: str, action: str):
        super().__init__(f"Component `{component}` has no action `{action}`")
        self.component = component
        self.action = action


class AuthenticationRequired(UpdateError):
    status_code = 401

    def __init__(self, action: str):
        super().__init__(f"Action `{action}` requires an authenticated user")
        self.action = action


class Forbidden(UpdateError):
    """Caller holds none of the roles the action accepts."""

    status_code = 403

    def __init__(self, action: str, roles: tuple[str, ...]):
        listed = "`, `".join(roles)
        super().__init__(f"Forbidden. This action requires one of these roles: `{listed}`")
        self.action = action
        self.roles = roles

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["roles"] = list(self.roles)
        return d


class ArgumentCountMismatch(UpdateError):
    status_code = 400

    def __init__(self, action: str, expected: int, received: int):
        super().__init__(f"Action `{action}` takes {expected} argument(s), received {received}")
        self.action = action
        self.expected = expected
        self.received = received


class ArgumentCoercionFailure(UpdateError):
    """A client token could not be converted to the declared parameter type."""

    status_code = 400

    def __init__(self, action: str, index: int, name: str, type_name: str, reason: str):
        super().__init__(
            f"Action `{action}` argument {index} (`{name}`) is not a valid {type_name}: {reason}"
        )
        self.action = action
        self.index = index
        self.name = name
        self.type_name = type_name


class FileNotFound(UpdateError):
    status_code = 400

    def __init__(self, field_name: str):
        super().__init__(f"No uploaded file under field `{field_name}`")
        self.field_name = field_name


class InvocationFault(UpdateError):
    """
    Raised by hosts when an action body failed. The original exception is
    chained as __cause__.
    """

    status_code = 500

    def __init__(self, component: str, action: str | None):
        super().__init__(f"Action `{action}` of component `{component}` failed")
        self.component = component
        self.action = action
