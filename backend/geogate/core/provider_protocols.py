"""Boundary Protocols — contract between the search service and geocoders.

Invariants:
    - Services depend on PlaceProvider, never on a concrete HTTP client
    - Results are opaque GeoJSON dicts, passed through unmodified

Design Decisions:
    - Protocol over ABC: structural subtyping, test stubs need no inheritance
    - Single provider today; aggregation across providers is not implemented
"""

from typing import Protocol


class PlaceProvider(Protocol):
    """Contract for an upstream geocoder, implemented by infrastructure."""
    async def fetch_places(self, query: str) -> dict: ...
