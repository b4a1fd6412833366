"""
Request context utilities for FastAPI using contextvars
"""
from contextvars import ContextVar
import uuid


class RequestContext:
    def __init__(self):
        self.request_id: str | None = None
        self.user_id: str | None = None
        self.barangay: str | None = None
        self.observation_id: str | None = None
        self.module_name: str | None = None
        self.request_method: str | None = None
        self.request_path: str | None = None


_request_context_var: ContextVar[RequestContext] = ContextVar("request_context", default=RequestContext())


class _RequestContextProxy:
    def __getattr__(self, name):
        return getattr(_request_context_var.get(), name)

    def __setattr__(self, name, value):
        # ensure we set on current context instance
        setattr(_request_context_var.get(), name, value)


request_context = _RequestContextProxy()


def clear_request_context():
    _request_context_var.set(RequestContext())


def create_request_id() -> str:
    # fresh context per request so values never leak between requests
    _request_context_var.set(RequestContext())
    rid = str(uuid.uuid4())
    request_context.request_id = rid
    return rid
