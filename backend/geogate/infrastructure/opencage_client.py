"""OpenCage Client — outbound geocoding call over httpx.

Invariants:
    - Query string: q, key, limit=20, no_annotations=1 (fixed template)
    - Body parsed as strict JSON; malformed body or NaN/Infinity → UpstreamParseError
    - Transport errors and non-2xx statuses propagate unchanged (httpx.HTTPError)
    - No retries, no caching
    - The API key is never logged

Design Decisions:
    - Parse from response.text with json.loads rather than response.json():
      the failure maps to our own UpstreamParseError with a body preview
    - Client injectable: tests pass an AsyncClient over httpx.MockTransport
"""

import json
import logging
import math

import httpx

from geogate.core.errors import UpstreamParseError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.opencagedata.com/geocode/v1/geojson"
RESULT_LIMIT = 20
_PREVIEW_CHARS = 200


def build_query_params(query: str, api_key: str) -> dict[str, str | int]:
    """Query parameters for the OpenCage GeoJSON endpoint."""
    return {
        "q": query,
        "key": api_key,
        "limit": RESULT_LIMIT,
        "no_annotations": 1,
    }


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def _parse_finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"{literal} overflows a JSON number")
    return value


def parse_geocoding_body(text: str):
    """Parse the raw upstream body; anything but strict JSON is a server error.

    NaN, Infinity and overflowing floats are rejected: the response encoder
    refuses them.
    """
    try:
        return json.loads(
            text, parse_constant=_reject_constant, parse_float=_parse_finite_float,
        )
    except ValueError as e:
        raise UpstreamParseError(str(e), text[:_PREVIEW_CHARS]) from e


class OpenCageClient:
    """PlaceProvider backed by the OpenCage geocoding API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def fetch_places(self, query: str) -> dict:
        response = await self.client.get(
            self.base_url, params=build_query_params(query, self.api_key),
        )
        response.raise_for_status()
        logger.debug(
            "OpenCage responded",
            extra={"status_code": response.status_code, "query_length": len(query)},
        )
        return parse_geocoding_body(response.text)

    async def aclose(self) -> None:
        await self.client.aclose()
