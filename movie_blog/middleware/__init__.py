# Middleware package init
"""
Movie Blog API - Middleware Package
====================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    Responses travel back through the chain in reverse, so the logging
    middleware sees the final status code and the request ID header is added
    last.
"""
