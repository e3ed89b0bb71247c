# Middleware package init
"""
Recordbook — Middleware Package
================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation id for log lines and the X-Request-ID header
    2. Logging: one access line per request, tagged with the request id
    3. GZip / CORS: Starlette built-ins configured in main.py
"""
