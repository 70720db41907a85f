# Middleware package init
"""
Social API Backend — Middleware Package
========================================

Middleware Chain (order matters):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    1. Rate Limit first: abusive requests are rejected before any work
    2. Request ID: correlation ID for logs and error bodies
    3. Logging: method, path, status and duration, tagged with the ID
"""
