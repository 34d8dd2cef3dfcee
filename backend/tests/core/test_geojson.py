"""GeoJSON helpers — canonical empty FeatureCollection."""

from geogate.core.geojson import empty_feature_collection


def test_empty_feature_collection_shape():
    """Canonical empty FeatureCollection."""
    assert empty_feature_collection() == {"type": "FeatureCollection", "features": []}


def test_empty_feature_collection_is_fresh_each_call():
    """Mutating one result does not leak into the next."""
    first = empty_feature_collection()
    first["features"].append({"type": "Feature"})
    assert empty_feature_collection()["features"] == []
