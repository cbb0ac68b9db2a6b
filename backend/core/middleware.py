import logging
import uuid
from contextvars import ContextVar

# Context vars so logging filters and the audit recorder can read request
# metadata without the request object being passed down.
_request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
_client_ip_ctx: ContextVar[str | None] = ContextVar("client_ip", default=None)


def get_current_request_id() -> str | None:
    """Return the current request_id from context, for logging."""
    return _request_id_ctx.get()


def get_current_client_ip() -> str | None:
    """Return the originating client IP of the current request, if any."""
    return _client_ip_ctx.get()


def client_ip_from_meta(meta) -> str | None:
    forwarded = meta.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop[:64]
    remote = meta.get("REMOTE_ADDR")
    return remote[:64] if remote else None


class RequestIDFilter(logging.Filter):
    """Injects request_id into log records for structured logging."""

    def filter(self, record):
        # Django logs may pass extra={"request": request}; Gunicorn logs use contextvar
        request = getattr(record, "request", None)
        record.request_id = (
            getattr(request, "request_id", None) or get_current_request_id()
        )
        return True


class RequestIDMiddleware:
    """
    Injects X-Request-ID into:
    - request object
    - response header
    - logging and audit context (via context vars)

    Also records the client IP for audit entries.
    """

    HEADER_NAME = "HTTP_X_REQUEST_ID"
    RESPONSE_HEADER = "X-Request-ID"

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.META.get(self.HEADER_NAME)

        if not request_id:
            request_id = str(uuid.uuid4())

        request.request_id = request_id[:64]
        request_token = _request_id_ctx.set(request.request_id)
        ip_token = _client_ip_ctx.set(client_ip_from_meta(request.META))

        try:
            response = self.get_response(request)
        finally:
            _request_id_ctx.reset(request_token)
            _client_ip_ctx.reset(ip_token)

        response[self.RESPONSE_HEADER] = request.request_id
        return response
