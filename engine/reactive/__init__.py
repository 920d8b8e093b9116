"""
Reactive Engine - server side of a reactive component.

Components:
  merge     - client $data/$props -> populated ViewModel + original snapshot
  invoker   - resolve, authorize, bind arguments, call the action
  diff      - (original, current) -> changed top-level fields  (pure)
  response  - {update, script, result} envelope writer
  update    - runs the whole pipeline for one request
"""

from engine.reactive.component import ComponentInfo, action
from engine.reactive.diff import diff
from engine.reactive.errors import (
    ActionNotFound,
    ArgumentCoercionFailure,
    ArgumentCountMismatch,
    AuthenticationRequired,
    FileNotFound,
    Forbidden,
    InvalidPayload,
    InvocationFault,
    UpdateError,
)
from engine.reactive.invoker import execute
from engine.reactive.merge import merge_state
from engine.reactive.types import ANONYMOUS, Caller, Principal
from engine.reactive.update import ComponentUpdate
from engine.reactive.uploads import MemoryUpload, MemoryUploads, Upload, UploadStore
from engine.reactive.values import deep_equal
from engine.reactive.viewmodel import ViewModel

__all__ = [
    "ANONYMOUS",
    "ActionNotFound",
    "ArgumentCoercionFailure",
    "ArgumentCountMismatch",
    "AuthenticationRequired",
    "Caller",
    "ComponentInfo",
    "ComponentUpdate",
    "FileNotFound",
    "Forbidden",
    "InvalidPayload",
    "InvocationFault",
    "MemoryUpload",
    "MemoryUploads",
    "Principal",
    "UpdateError",
    "Upload",
    "UploadStore",
    "ViewModel",
    "action",
    "deep_equal",
    "diff",
    "execute",
    "merge_state",
]
