# Visualization module
from .errors import (
    EmptyDataset,
    InvalidCoordinate,
    NonNumericValue,
    PopupFormatError,
    RenderError,
    UnknownField,
    UnsupportedLayer,
)
from .specs import HeatmapLayer, PopupField, QuantizedMarker, ThresholdMarker, TileConfig
from .document import Legend, MapDocument, RenderResult
from .layers import create_layer
from .map_view import render
from .presets import get_preset

__all__ = [
    "render",
    "create_layer",
    "get_preset",
    "TileConfig",
    "PopupField",
    "ThresholdMarker",
    "QuantizedMarker",
    "HeatmapLayer",
    "MapDocument",
    "Legend",
    "RenderResult",
    "RenderError",
    "EmptyDataset",
    "UnknownField",
    "NonNumericValue",
    "InvalidCoordinate",
    "UnsupportedLayer",
    "PopupFormatError",
]
