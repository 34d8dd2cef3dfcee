"""Core Layer — error taxonomy, resolution policy, pipeline value types.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - No IO, no async (provider_protocols only declares the async boundary)

Design Decisions:
    - Functional core separated from imperative shell: the composer and the
      adapter live outside core and call into these pure pieces
"""
