# Middleware package init
"""
Products API — Middleware Package
===================================

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler
    Response ← [Request ID] ← [Logging] ← Route Handler

    Request ID runs first so every access-log line and error log carries
    the correlation id.
"""
