"""mapstostructs: bind loosely-typed mappings and sequences to dataclasses and typed dicts."""

import importlib.metadata as importlib_metadata

from mapstostructs.binder import Binder, bind, map_to_map, map_to_struct, maps_to_structs
from mapstostructs.errors import (
    ConversionError,
    MapsToStructsError,
    PathSegment,
    ReceiverError,
    RecursionDepthError,
)
from mapstostructs.kinds import Kind, classify, type_name
from mapstostructs.options import BindOptions
from mapstostructs.tags import DEFAULT_TAG, build_tag_map
from mapstostructs.types import (
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)


def _detect_version() -> str:
    """Return installed package version or a local fallback when metadata is unavailable."""
    try:
        return importlib_metadata.version("mapstostructs")
    except importlib_metadata.PackageNotFoundError:
        return "0.0.0+unknown"


__version__ = _detect_version()

__all__ = [
    "DEFAULT_TAG",
    "BindOptions",
    "Binder",
    "ConversionError",
    "Float32",
    "Float64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Kind",
    "MapsToStructsError",
    "PathSegment",
    "ReceiverError",
    "RecursionDepthError",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "bind",
    "build_tag_map",
    "classify",
    "map_to_map",
    "map_to_struct",
    "maps_to_structs",
    "type_name",
]
