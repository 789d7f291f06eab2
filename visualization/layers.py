"""Layer factories: bind a LayerSpec to a prepared dataset."""

from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from config.logging_config import get_logger
from data.pipeline import LAT, LON, coerce_numeric
from utils.scaling import (
    assign_bins,
    compute_bin_edges,
    format_number,
    rescale,
    scale_radius,
)
from visualization.document import HeatPoint, Marker, PopupRows, RealizedLayer
from visualization.errors import PopupFormatError, UnknownField, UnsupportedLayer
from visualization.specs import (
    HeatmapLayer,
    LayerSpec,
    PopupField,
    QuantizedMarker,
    ThresholdMarker,
)

logger = get_logger("visualization.layers")


def create_layer(spec: LayerSpec, data: pd.DataFrame) -> RealizedLayer:
  """
  Factory function to realize any LayerSpec.

  Args:
      spec: ThresholdMarker, QuantizedMarker or HeatmapLayer
      data: Prepared DataFrame (see data.pipeline.prepare_dataset)

  Returns:
      RealizedLayer

  Raises:
      UnknownField: spec references a column missing from data
      UnsupportedLayer: no factory exists for the spec kind
      PopupFormatError: a popup formatter failed on a record
  """
  layer_factories = {
      "threshold": create_threshold_layer,
      "quantized": create_quantized_layer,
      "heatmap": create_heatmap_layer,
  }

  try:
    factory = layer_factories[spec.kind]
  except KeyError:
    raise UnsupportedLayer(
        f"Layer '{spec.name}' has unsupported spec type {type(spec).__name__}",
        layer=spec.name,
        field=spec.field,
    ) from None

  check_fields(spec, data)
  return factory(spec, data)


def check_fields(spec: LayerSpec, data: pd.DataFrame) -> None:
  """Raise UnknownField for the first referenced column data lacks."""
  for name in spec.referenced_fields:
    if name not in data.columns:
      raise UnknownField(
          f"Layer '{spec.name}' references unknown field '{name}'",
          layer=spec.name,
          field=name,
      )


def build_popups(
    data: pd.DataFrame,
    fields: Sequence[PopupField],
    layer: Optional[str] = None,
) -> List[PopupRows]:
  """
  Format popup rows for every record.

  Args:
      data: Records to describe
      fields: Ordered popup fields
      layer: Layer name reported when a formatter fails

  Returns:
      One tuple of (label, text) pairs per record

  Raises:
      PopupFormatError: a formatter raised
  """
  if not fields:
    return [()] * len(data)

  columns = [data[f.field].tolist() for f in fields]
  popups = []
  for values in zip(*columns):
    rows = []
    for popup_field, value in zip(fields, values):
      if popup_field.formatter is not None:
        try:
          text = popup_field.formatter(value)
        except Exception as e:
          raise PopupFormatError(
              f"Popup formatter for '{popup_field.field}' failed on {value!r}: {e}",
              layer=layer,
              field=popup_field.field,
          ) from e
      else:
        text = format_number(value, popup_field.precision)
      rows.append((popup_field.label, text))
    popups.append(tuple(rows))
  return popups


def _default_popup(spec: LayerSpec) -> Tuple[PopupField, ...]:
  return spec.popup or (PopupField(spec.name, spec.field),)


def _log_exclusions(spec: LayerSpec, excluded: int, total: int) -> None:
  if excluded:
    logger.warning(
        f"Layer '{spec.name}': excluded {excluded} of {total} records "
        f"with non-numeric '{spec.field}'"
    )


def create_threshold_layer(spec: ThresholdMarker, data: pd.DataFrame) -> RealizedLayer:
  """
  Create two-color markers split on spec.threshold.

  Color is above_color when the value is strictly greater than the
  threshold. Radius comes from radius_field through radius_fn and
  radius_scale, never below min_radius; without a radius_field every
  marker gets spec.radius.

  Args:
      spec: ThresholdMarker
      data: Prepared DataFrame

  Returns:
      RealizedLayer with markers
  """
  values, _ = coerce_numeric(data[spec.field])
  usable = values.notna()

  if spec.radius_field:
    radius_values, radius_non_numeric = coerce_numeric(data[spec.radius_field])
    # Missing radius inputs fall back to min_radius; garbage excludes the record
    usable &= ~radius_non_numeric
    radii = scale_radius(
        radius_values,
        radius_fn=spec.radius_fn,
        scale=spec.radius_scale,
        min_radius=spec.min_radius,
    )
  else:
    radii = np.full(len(data), max(spec.radius, spec.min_radius))

  mask = usable.to_numpy()
  kept = data[mask]
  kept_values = values[mask].to_numpy()
  kept_radii = radii[mask]
  popups = build_popups(kept, _default_popup(spec), layer=spec.name)

  markers = tuple(
      Marker(
          latitude=lat,
          longitude=lon,
          color=spec.above_color if value > spec.threshold else spec.below_color,
          radius=float(radius),
          value=float(value),
          popup=popup,
      )
      for lat, lon, value, radius, popup in zip(
          kept[LAT].tolist(), kept[LON].tolist(), kept_values, kept_radii, popups
      )
  )

  excluded = len(data) - len(markers)
  _log_exclusions(spec, excluded, len(data))

  return RealizedLayer(
      name=spec.name,
      group=spec.group,
      kind=spec.kind,
      field=spec.field,
      visible=spec.visible_by_default,
      markers=markers,
      excluded_count=excluded,
  )


def create_quantized_layer(spec: QuantizedMarker, data: pd.DataFrame) -> RealizedLayer:
  """
  Create markers colored by bin.

  Bin edges are computed once over the whole usable column and stored on
  the layer as `breaks`; the legend is built from those same edges.

  Args:
      spec: QuantizedMarker
      data: Prepared DataFrame

  Returns:
      RealizedLayer with markers and breaks
  """
  values, _ = coerce_numeric(data[spec.field])
  mask = values.notna().to_numpy()
  kept = data[mask]
  kept_values = values[mask]

  excluded = len(data) - len(kept)
  _log_exclusions(spec, excluded, len(data))

  if kept.empty:
    return RealizedLayer(
        name=spec.name,
        group=spec.group,
        kind=spec.kind,
        field=spec.field,
        visible=spec.visible_by_default,
        excluded_count=excluded,
    )

  edges = compute_bin_edges(kept_values, len(spec.palette), spec.method)
  bins = assign_bins(kept_values, edges)
  popups = build_popups(kept, _default_popup(spec), layer=spec.name)

  markers = tuple(
      Marker(
          latitude=lat,
          longitude=lon,
          color=spec.palette[bin_index],
          radius=float(spec.radius),
          value=float(value),
          popup=popup,
      )
      for lat, lon, value, bin_index, popup in zip(
          kept[LAT].tolist(), kept[LON].tolist(), kept_values.tolist(), bins, popups
      )
  )

  logger.debug(f"Layer '{spec.name}': {spec.method} breaks {np.round(edges, 4).tolist()}")

  return RealizedLayer(
      name=spec.name,
      group=spec.group,
      kind=spec.kind,
      field=spec.field,
      visible=spec.visible_by_default,
      markers=markers,
      breaks=tuple(float(e) for e in edges),
      excluded_count=excluded,
  )


def gradient_stops(gradient: Sequence) -> Tuple[Tuple[float, object], ...]:
  """Spread gradient colors evenly over [0, 1]."""
  stops = np.linspace(0.0, 1.0, len(gradient))
  return tuple((round(float(stop), 4), color) for stop, color in zip(stops, gradient))


def create_heatmap_layer(spec: HeatmapLayer, data: pd.DataFrame) -> RealizedLayer:
  """
  Create heat points with intensity rescaled into [0, 1].

  Args:
      spec: HeatmapLayer
      data: Prepared DataFrame

  Returns:
      RealizedLayer with heat points, radius, blur and gradient stops
  """
  values, _ = coerce_numeric(data[spec.field])
  mask = values.notna().to_numpy()
  kept = data[mask]
  kept_values = values[mask]

  excluded = len(data) - len(kept)
  _log_exclusions(spec, excluded, len(data))

  intensities = rescale(kept_values, spec.value_range)

  heat_points = tuple(
      HeatPoint(latitude=lat, longitude=lon, intensity=float(intensity), value=float(value))
      for lat, lon, intensity, value in zip(
          kept[LAT].tolist(), kept[LON].tolist(), intensities, kept_values.tolist()
      )
  )

  return RealizedLayer(
      name=spec.name,
      group=spec.group,
      kind=spec.kind,
      field=spec.field,
      visible=spec.visible_by_default,
      heat_points=heat_points,
      radius=spec.radius,
      blur=spec.blur,
      gradient=gradient_stops(spec.gradient),
      excluded_count=excluded,
  )
