"""
Notes API — Middleware Package
================================

Cross-cutting concerns applied to every request.

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first: every later log line can carry it
    2. Logging: records status and duration once the response comes back
"""
