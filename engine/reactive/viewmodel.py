"""
Reactive Engine - ViewModel Base Class

A component's observable state is the set of fields declared on a ViewModel
subclass. Pydantic validates every assignment, so populating a field from
client data goes through the same typed setter as server code.

Request-scoped context (caller, original snapshot, client scripts) lives in
private attributes and never appears in snapshots.
"""

from __future__ import annotations

import copy
import json
from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr

from engine.reactive.types import ANONYMOUS, Caller, Snapshot


class ViewModel(BaseModel):
    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    _caller: Caller = PrivateAttr(default=ANONYMOUS)
    _original: Snapshot = PrivateAttr(default_factory=dict)
    _scripts: list[str] = PrivateAttr(default_factory=list)
    _disposed: bool = PrivateAttr(default=False)

    # -- request context --

    def bind_request(self, caller: Caller, original: Snapshot) -> None:
        """Attach the caller and the state received from the client."""
        self._caller = caller
        self._original = original

    @property
    def caller(self) -> Caller:
        return self._caller

    @property
    def original(self) -> Snapshot:
        """State as received from the client, before the action ran."""
        return copy.deepcopy(self._original)

    # -- snapshots --

    def snapshot(self) -> Snapshot:
        """Public observable fields as JSON values, in declaration order."""
        return self.model_dump(mode="json")

    # -- client script --

    def run_script(self, code: str) -> None:
        self._scripts.append(code)

    def emit(self, event: str, *args: Any) -> None:
        """Ask the client component to emit an event with JSON arguments."""
        encoded = ", ".join(json.dumps(a, ensure_ascii=False) for a in (event, *args))
        self.run_script(f"this.$emit({encoded})")

    def client_script(self) -> str:
        return "\n".join(self._scripts)

    # -- lifecycle --

    def on_dispose(self) -> None:
        """Override to release request resources."""

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self.on_dispose()

    @property
    def disposed(self) -> bool:
        return self._disposed

    def __enter__(self) -> ViewModel:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()
