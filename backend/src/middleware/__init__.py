"""Request tracing middleware."""

from src.middleware.performance import RequestIDMiddleware, RequestTimingMiddleware, get_request_id

__all__ = ["RequestIDMiddleware", "RequestTimingMiddleware", "get_request_id"]
