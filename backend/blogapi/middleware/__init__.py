"""
Blog API - Middleware Package
=============================

Cross-cutting concerns applied to every request.

Chain (request direction):
    Request → [Request ID] → [Access log] → [GZip] → [CORS] → Route handler

The request id is assigned first so the access log line and every log
record written while handling the request can carry it.
"""
