"""
Reactive Engine - Component Update

Runs one update request end to end:

  merge $data/$props -> original snapshot -> invoke action
    -> current snapshot -> diff -> write {update, script, result}

The ViewModel is disposed exactly once on every exit path, including
authorization failures, binding failures, action faults and cancellation.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from engine.reactive.component import ComponentInfo
from engine.reactive.diff import diff
from engine.reactive.invoker import execute
from engine.reactive.merge import StateBlob, merge_state
from engine.reactive.response import TextSink, write_response
from engine.reactive.types import ANONYMOUS, Caller
from engine.reactive.uploads import UploadStore
from engine.reactive.viewmodel import ViewModel

logger = logging.getLogger(__name__)


class ComponentUpdate:
    """Execute a requested action and send the ViewModel changes back."""

    def __init__(self, component: ComponentInfo, caller: Caller = ANONYMOUS) -> None:
        self._component = component
        self._caller = caller

    async def update_model(
        self,
        vm: ViewModel,
        data: StateBlob,
        props: StateBlob,
        method: str | None,
        parameters: Sequence[Any],
        files: UploadStore,
        writer: TextSink,
    ) -> None:
        """
        Apply client state to vm, run `method` and write the response
        envelope to writer.

        An empty method performs a state round trip without invoking anything.
        """
        with vm:
            original = merge_state(vm, data, props)
            vm.bind_request(self._caller, original)

            result = None
            if method:
                result = await execute(self._component, method, vm, parameters, files, self._caller)

            current = vm.snapshot()
            scripts = vm.client_script()
            update = diff(original, current)

            write_response(writer, update, scripts, result)

            logger.info(
                "update: %s.%s changed %d field(s)",
                self._component.name,
                method or "-",
                len(update),
            )
