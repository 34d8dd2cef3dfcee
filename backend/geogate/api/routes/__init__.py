"""Route Modules — one file per resource, each exposing RouteDescriptor lists.

Invariants:
    - Routes never contain business logic (delegate to services)

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
