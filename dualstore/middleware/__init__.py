# Middleware package init
"""
DualStore API - Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler

    Request ID runs first so the access log line and any error response
    carry the same correlation ID.
"""
