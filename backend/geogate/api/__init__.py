"""API Layer — composition of middleware, routes and error stages onto FastAPI.

Invariants:
    - Routes registered explicitly from RouteDescriptor lists (no auto-discovery)
    - Handlers never touch Starlette's Request; they get a RequestView

Design Decisions:
    - Thin handlers delegate to services
"""
