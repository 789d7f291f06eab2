"""Layer composition: dataset + layer specs -> MapDocument."""

import math
from typing import List, Optional, Sequence, Tuple, Union

import pandas as pd

from config.logging_config import get_logger
from config.settings import settings
from data.pipeline import LAT, LON, DatasetLike, prepare_dataset
from .document import MapDocument, RealizedLayer, RenderResult
from .errors import EmptyDataset, InvalidCoordinate, NonNumericValue, RenderError
from .layers import create_layer
from .legends import build_legends
from .specs import LayerSpec, TileConfig

engine_logger = get_logger("visualization.engine")

Bounds = Tuple[Tuple[float, float], Tuple[float, float]]


def compute_center(data: pd.DataFrame) -> Tuple[float, float]:
    """
    Mean latitude/longitude of a prepared, non-empty frame.

    Args:
        data: Frame with canonical coordinate columns

    Returns:
        (latitude, longitude)
    """
    return float(data[LAT].mean()), float(data[LON].mean())


def compute_bounds(data: pd.DataFrame) -> Bounds:
    """
    South-west and north-east corners of the valid coordinates.

    Returns:
        ((min_lat, min_lon), (max_lat, max_lon))
    """
    return (
        (float(data[LAT].min()), float(data[LON].min())),
        (float(data[LAT].max()), float(data[LON].max())),
    )


def zoom_for_bounds(bounds: Bounds, padding: float = 0.1) -> float:
    """
    Approximate the largest zoom level that shows the whole bounding box.

    At zoom z roughly 180 / 2**z degrees of latitude and 360 / 2**z of
    longitude are visible, so this inverts that relation for the wider axis.

    Args:
        bounds: ((min_lat, min_lon), (max_lat, max_lon))
        padding: Extra margin as a fraction of the span

    Returns:
        Zoom clamped to [settings.map.min_zoom, settings.map.max_zoom]
    """
    (min_lat, min_lon), (max_lat, max_lon) = bounds
    lat_span = (max_lat - min_lat) * (1 + padding)
    lon_span = (max_lon - min_lon) * (1 + padding)

    if lat_span <= 0 and lon_span <= 0:
        return float(settings.map.max_zoom)

    zooms = []
    if lat_span > 0:
        zooms.append(math.log2(180 / lat_span))
    if lon_span > 0:
        zooms.append(math.log2(360 / lon_span))

    zoom = math.floor(min(zooms))
    return float(min(max(zoom, settings.map.min_zoom), settings.map.max_zoom))


def render(
    dataset: DatasetLike,
    layers: Sequence[LayerSpec],
    base_tile: TileConfig,
    zoom: Optional[Union[float, str]] = None,
    lat_col: Optional[str] = None,
    lon_col: Optional[str] = None,
) -> RenderResult:
    """
    Compose a MapDocument from a dataset and a list of layer specs.

    Document-level failure (no valid records) returns a result with
    `error` set and no document. A layer that references a missing field
    is skipped and listed in `layer_errors`; records with non-numeric
    values are excluded from the affected layer only and reported in
    `warnings`.

    Args:
        dataset: DataFrame or iterable of records
        layers: Layer specs in drawing order
        base_tile: Basemap reference
        zoom: Fixed zoom, "fit" to derive one from the data bounds,
            or None for settings.map.default_zoom
        lat_col: Explicit latitude column
        lon_col: Explicit longitude column

    Returns:
        RenderResult
    """
    data, dropped = prepare_dataset(dataset, lat_col=lat_col, lon_col=lon_col)

    warnings: List[RenderError] = []
    if dropped:
        warnings.append(
            InvalidCoordinate(
                f"{dropped} records with missing or out-of-range coordinates were dropped",
                count=dropped,
            )
        )

    if data.empty:
        engine_logger.info("Nothing to render: dataset has no valid records")
        return RenderResult(
            error=EmptyDataset("Dataset has no records with valid coordinates", count=dropped),
            warnings=tuple(warnings),
        )

    center = compute_center(data)
    bounds = compute_bounds(data)

    if zoom == "fit":
        view_zoom = zoom_for_bounds(bounds)
    elif zoom is None:
        view_zoom = float(settings.map.default_zoom)
    else:
        view_zoom = float(zoom)

    realized: List[Tuple[LayerSpec, RealizedLayer]] = []
    layer_errors: List[RenderError] = []

    for spec in layers:
        try:
            layer = create_layer(spec, data)
        except RenderError as e:
            engine_logger.warning(f"Skipping layer '{spec.name}': {e.message}")
            layer_errors.append(e)
            continue

        if layer.excluded_count:
            warnings.append(
                NonNumericValue(
                    f"Layer '{spec.name}' excluded {layer.excluded_count} records "
                    f"without a numeric value",
                    layer=spec.name,
                    field=spec.field,
                    count=layer.excluded_count,
                )
            )
        realized.append((spec, layer))

    document = MapDocument(
        tile=base_tile,
        center=center,
        zoom=view_zoom,
        bounds=bounds,
        layers=tuple(layer for _, layer in realized),
        legends=build_legends(realized),
        record_count=len(data),
        dropped_records=dropped,
    )

    engine_logger.info(
        f"Rendered {len(document.layers)}/{len(layers)} layers over {len(data)} records "
        f"(center={center[0]:.4f},{center[1]:.4f} zoom={view_zoom:g})"
    )

    return RenderResult(
        document=document,
        layer_errors=tuple(layer_errors),
        warnings=tuple(warnings),
    )
