"""GeoJSON areas: FeatureCollections of Polygon and MultiPolygon features."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from shapely.errors import GEOSException
from shapely.geometry import Point, shape
from shapely.geometry.base import BaseGeometry

AREA_GEOMETRY_TYPES = ("Polygon", "MultiPolygon")


def area_shapes(area: Any) -> list[BaseGeometry]:
    """One shape per feature of `area`.

    Raises ValueError unless `area` is a FeatureCollection whose features are
    all polygons with well-formed coordinates.
    """

    if not isinstance(area, Mapping) or area.get("type") != "FeatureCollection":
        raise ValueError(f"not a GeoJSON FeatureCollection: {area!r}")
    features = area.get("features")
    if not isinstance(features, Sequence) or isinstance(features, str):
        raise ValueError("FeatureCollection has no features list")

    shapes = []
    for feature in features:
        geometry = feature.get("geometry") if isinstance(feature, Mapping) else None
        kind = geometry.get("type") if isinstance(geometry, Mapping) else None
        if kind not in AREA_GEOMETRY_TYPES:
            raise ValueError(f"unsupported area geometry: {kind!r}")
        try:
            shapes.append(shape(geometry))
        except (GEOSException, TypeError, ValueError, KeyError, IndexError) as e:
            raise ValueError(f"invalid {kind} coordinates: {e}") from e
    return shapes


def point_in_area(point: Sequence[float], area: Any) -> bool:
    """True when (lon, lat) `point` lies inside or on the edge of any feature."""
    p = Point(point[0], point[1])
    return any(s.covers(p) for s in area_shapes(area))
