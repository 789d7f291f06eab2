"""Declarative layer specifications.

A LayerSpec says which field drives a layer and how its values map to
color, size or heat intensity. Specs are immutable and carry no data;
`visualization.map_view.render` binds them to a dataset.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple, Union

from config.settings import settings
from utils.scaling import BINNING_METHODS, RADIUS_FUNCTIONS

Color = Union[str, Tuple[int, ...]]


@dataclass(frozen=True)
class TileConfig:
  """Basemap reference supplied by the caller."""

  url_template: str
  attribution: str = ""


@dataclass(frozen=True)
class PopupField:
  """One popup row: a label, the field it shows and how to format it."""

  label: str
  field: str
  precision: int = settings.map.popup_precision
  formatter: Optional[Callable[[object], str]] = None


@dataclass(frozen=True, kw_only=True)
class LayerSpec:
  """Fields shared by every layer variant."""

  field: str
  name: str = ""
  group: str = ""
  visible_by_default: bool = True
  popup: Tuple[PopupField, ...] = ()
  legend_title: Optional[str] = None

  kind = "layer"

  def __post_init__(self):
    if not self.name:
      object.__setattr__(self, "name", self.field)
    if not self.group:
      object.__setattr__(self, "group", self.name)
    object.__setattr__(self, "popup", tuple(self.popup))

  @property
  def referenced_fields(self) -> Tuple[str, ...]:
    """Every column this spec reads, in first-use order."""
    fields = [self.field] + [p.field for p in self.popup]
    return tuple(dict.fromkeys(fields))


@dataclass(frozen=True, kw_only=True)
class ThresholdMarker(LayerSpec):
  """Two-color circle markers split on a numeric threshold."""

  threshold: float
  above_color: Color
  below_color: Color
  above_label: Optional[str] = None
  below_label: Optional[str] = None
  radius_field: Optional[str] = None
  radius_fn: Union[str, Callable] = "sqrt"
  radius_scale: float = 1.0
  radius: float = settings.map.default_marker_radius
  min_radius: float = settings.map.min_radius

  kind = "threshold"

  def __post_init__(self):
    super().__post_init__()
    if not callable(self.radius_fn) and self.radius_fn not in RADIUS_FUNCTIONS:
      raise ValueError(
          f"Unknown radius function '{self.radius_fn}' for layer '{self.name}'"
      )
    if self.min_radius <= 0:
      raise ValueError(f"min_radius must be positive, got {self.min_radius}")
    if self.above_label is None:
      object.__setattr__(self, "above_label", f"> {self.threshold:g}")
    if self.below_label is None:
      object.__setattr__(self, "below_label", f"≤ {self.threshold:g}")

  @property
  def referenced_fields(self) -> Tuple[str, ...]:
    fields = list(super().referenced_fields)
    if self.radius_field:
      fields.insert(1, self.radius_field)
    return tuple(dict.fromkeys(fields))


@dataclass(frozen=True, kw_only=True)
class QuantizedMarker(LayerSpec):
  """Markers colored by which bin of a numeric column their value falls in."""

  palette: Sequence[Color]
  method: str = "quantile"
  bin_names: Optional[Sequence[str]] = None
  radius: float = settings.map.default_marker_radius

  kind = "quantized"

  def __post_init__(self):
    super().__post_init__()
    object.__setattr__(self, "palette", tuple(self.palette))
    if not self.palette:
      raise ValueError(f"Layer '{self.name}' needs at least one palette color")
    if self.method not in BINNING_METHODS:
      raise ValueError(
          f"Unknown binning method '{self.method}'. Expected one of {BINNING_METHODS}."
      )
    if self.bin_names is not None:
      object.__setattr__(self, "bin_names", tuple(self.bin_names))
      if len(self.bin_names) != len(self.palette):
        raise ValueError(
            f"Layer '{self.name}' has {len(self.palette)} colors "
            f"but {len(self.bin_names)} bin names"
        )


@dataclass(frozen=True, kw_only=True)
class HeatmapLayer(LayerSpec):
  """Heat intensity from a numeric field rescaled into [0, 1]."""

  gradient: Sequence[Color]
  value_range: Optional[Tuple[float, float]] = None
  radius: int = settings.map.heat_radius
  blur: int = settings.map.heat_blur

  kind = "heatmap"

  def __post_init__(self):
    super().__post_init__()
    object.__setattr__(self, "gradient", tuple(self.gradient))
    if len(self.gradient) < 2:
      raise ValueError(f"Heatmap '{self.name}' gradient needs at least two colors")
    if self.value_range is not None:
      low, high = self.value_range
      if high < low:
        raise ValueError(f"Heatmap '{self.name}' value_range is reversed: {self.value_range}")
