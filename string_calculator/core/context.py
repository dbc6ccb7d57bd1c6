from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_request_id_ctx_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    return _request_id_ctx_var.get()


@contextmanager
def request_scope(request_id: Optional[str] = None) -> Iterator[str]:
    """Bind a request id (generated when absent) for the duration of the block."""

    value = request_id or uuid.uuid4().hex
    token = _request_id_ctx_var.set(value)
    try:
        yield value
    finally:
        _request_id_ctx_var.reset(token)
