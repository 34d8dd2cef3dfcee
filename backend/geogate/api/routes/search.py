"""Search Routes — GET /api/v1/search?q=<text>.

Invariants:
    - require_query_param("q") runs before the search handler
    - The handler assumes a non-empty q and returns the provider payload as JSON
"""

from geogate.api.validation import require_query_param
from geogate.core.pipeline import (
    Handler, HttpMethod, Next, RequestView, ResponseSink, RouteDescriptor,
)
from geogate.services.place_search import PlaceSearch

SEARCH_PATH = "/api/v1/search"


def make_search_handler(search: PlaceSearch) -> Handler:
    async def search_places(
        request: RequestView, response: ResponseSink, next_: Next,
    ) -> None:
        result = await search.search(request.query["q"])
        response.status(200).json(result)

    return search_places


def search_routes(search: PlaceSearch) -> list[RouteDescriptor]:
    return [
        RouteDescriptor(
            path=SEARCH_PATH,
            method=HttpMethod.GET,
            handler=(require_query_param("q"), make_search_handler(search)),
        ),
    ]
