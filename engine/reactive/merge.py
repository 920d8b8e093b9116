"""
Reactive Engine - State Merger

Populates a fresh ViewModel from the client's $data and $props blobs and
captures the original snapshot the diff is computed against.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from engine.reactive.errors import InvalidPayload
from engine.reactive.types import Snapshot
from engine.reactive.viewmodel import ViewModel

logger = logging.getLogger(__name__)

StateBlob = str | bytes | Mapping[str, Any] | None


def load_blob(blob: StateBlob, label: str) -> Mapping[str, Any]:
    """Decode a serialized state blob. Empty or None means no values."""
    if blob is None:
        return {}
    if isinstance(blob, Mapping):
        return blob
    if not blob.strip():
        return {}
    try:
        decoded = json.loads(blob)
    except json.JSONDecodeError as e:
        raise InvalidPayload(f"${label} is not valid JSON: {e}") from e
    if decoded is None:
        return {}
    if not isinstance(decoded, dict):
        raise InvalidPayload(f"${label} must be a JSON object")
    return decoded


def populate(vm: ViewModel, values: Mapping[str, Any], label: str) -> None:
    """Assign each declared field present in values. Unknown keys are ignored."""
    fields = type(vm).model_fields
    for name, value in values.items():
        if name not in fields:
            logger.debug("merge: ignoring unknown %s field %r on %s", label, name, type(vm).__name__)
            continue
        try:
            setattr(vm, name, value)
        except ValidationError as e:
            raise InvalidPayload(f"${label}.{name} is invalid: {e.errors()[0]['msg']}") from e


def merge_state(vm: ViewModel, data: StateBlob, props: StateBlob) -> Snapshot:
    """
    Populate vm with $data then $props (props win on collision) and return
    the original snapshot.
    """
    populate(vm, load_blob(data, "data"), "data")
    populate(vm, load_blob(props, "props"), "props")
    return vm.snapshot()
