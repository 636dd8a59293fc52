"""Middleware and exception handlers applied to every request.

Registration order in ``create_app`` (outermost first when handling):
1. RequestContextMiddleware - correlation ID
2. RequestLoggingMiddleware - request/response logging with timing
Exception handlers from ``error_handler`` render all error responses.
"""
