"""Place Search — validates query length and delegates to the geocoder.

Invariants:
    - Queries shorter than MIN_QUERY_LENGTH never reach the provider
    - Short queries yield a fresh empty FeatureCollection (not an error)
    - Provider results are returned verbatim, untransformed
    - Provider failures propagate unchanged

Design Decisions:
    - Short-circuit lives here, not in validation: the caller did nothing wrong,
      a two-letter query is just not worth an upstream call
"""

import logging

from geogate.core.geojson import empty_feature_collection
from geogate.core.provider_protocols import PlaceProvider

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3


class PlaceSearch:
    """Search use case over a single PlaceProvider."""

    def __init__(self, provider: PlaceProvider):
        self.provider = provider

    async def search(self, query: str) -> dict:
        if len(query) < MIN_QUERY_LENGTH:
            logger.debug(
                "Query below minimum length, skipping provider",
                extra={"query_length": len(query)},
            )
            return empty_feature_collection()
        return await self.provider.fetch_places(query)
