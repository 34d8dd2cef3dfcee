"""Infrastructure Layer — upstream clients, ASGI middleware, logging setup.

Invariants:
    - Upstream failures propagate unchanged; nothing here retries or caches
    - Middleware never inspects request bodies
"""
