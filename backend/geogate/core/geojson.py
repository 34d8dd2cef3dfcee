"""GeoJSON helpers — canonical values shared by the search service and tests."""

FEATURE_COLLECTION = "FeatureCollection"


def empty_feature_collection() -> dict:
    """Return a fresh empty FeatureCollection (callers may mutate it)."""
    return {"type": FEATURE_COLLECTION, "features": []}
