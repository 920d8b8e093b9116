"""Component update route - multipart in, {update, script, result} out."""

from __future__ import annotations

import io
import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response

from backend.auth import get_caller
from backend.config import settings
from backend.registry import registry
from backend.uploads import FormUploads
from engine.reactive.errors import InvalidPayload, InvocationFault, UpdateError
from engine.reactive.types import Principal
from engine.reactive.update import ComponentUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/components", tags=["components"])


def _form_text(value: Any) -> str | None:
    """Form fields arrive as str; an upload under a reserved name is ignored."""
    return value if isinstance(value, str) else None


def parse_params(raw: str | None) -> list[Any]:
    """Decode the `params` form field: a JSON array of argument tokens."""
    if not raw:
        return []
    try:
        params = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidPayload(f"params is not valid JSON: {e}") from e
    if not isinstance(params, list):
        raise InvalidPayload("params must be a JSON array")
    if len(params) > settings.MAX_PARAMS:
        raise InvalidPayload(f"params has more than {settings.MAX_PARAMS} entries")
    return params


@router.get("", status_code=200)
async def list_components() -> list[str]:
    """Names of every registered component."""
    return registry.names()


@router.post("/{name}/update", status_code=200)
async def update_component(
    name: str,
    request: Request,
    caller: Principal = Depends(get_caller),
) -> Response:
    """
    Run one component update.

    Form fields:
    - data: JSON object with the component's $data
    - props: JSON object with the component's $props
    - method: action name (omit for a plain state round trip)
    - params: JSON array of action arguments
    - any other field: uploaded files, referenced from params by field name
    """
    component = registry.get(name)
    if component is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Component not found.")

    form = await request.form()
    method = _form_text(form.get("method"))
    params = parse_params(_form_text(form.get("params")))

    # Buffered, not streamed: a failure after the status line is sent could
    # only truncate the body, while here it still becomes a JSON error.
    body = io.StringIO()
    try:
        await ComponentUpdate(component, caller).update_model(
            component.create(),
            _form_text(form.get("data")),
            _form_text(form.get("props")),
            method,
            params,
            FormUploads(form),
            body,
        )
    except UpdateError:
        raise
    except Exception as e:
        logger.exception("update: %s.%s raised", name, method)
        raise InvocationFault(name, method) from e
    finally:
        await form.close()

    return Response(content=body.getvalue(), media_type="application/json")
