"""Renderer-agnostic output of the layer composition engine."""

from dataclasses import dataclass
from typing import Optional, Tuple

from visualization.errors import RenderError
from visualization.specs import Color, TileConfig

PopupRows = Tuple[Tuple[str, str], ...]


@dataclass(frozen=True)
class Marker:
  """One styled circle marker."""

  latitude: float
  longitude: float
  color: Color
  radius: float
  value: float
  popup: PopupRows = ()


@dataclass(frozen=True)
class HeatPoint:
  """One weighted heatmap point."""

  latitude: float
  longitude: float
  intensity: float
  value: float


@dataclass(frozen=True)
class RealizedLayer:
  """A LayerSpec bound to styled geometry."""

  name: str
  group: str
  kind: str
  field: str
  visible: bool
  markers: Tuple[Marker, ...] = ()
  heat_points: Tuple[HeatPoint, ...] = ()
  # Heatmap only
  radius: Optional[float] = None
  blur: Optional[float] = None
  gradient: Tuple[Tuple[float, Color], ...] = ()
  # Bin edges for quantized layers
  breaks: Tuple[float, ...] = ()
  excluded_count: int = 0

  @property
  def size(self) -> int:
    return len(self.markers) + len(self.heat_points)


@dataclass(frozen=True)
class Legend:
  """Title plus parallel color/label sequences for one layer group."""

  title: str
  group: str
  colors: Tuple[Color, ...]
  labels: Tuple[str, ...]
  breaks: Tuple[float, ...] = ()


@dataclass(frozen=True)
class MapDocument:
  """Everything a display collaborator needs to draw the map."""

  tile: TileConfig
  center: Tuple[float, float]
  zoom: float
  bounds: Tuple[Tuple[float, float], Tuple[float, float]]
  layers: Tuple[RealizedLayer, ...] = ()
  legends: Tuple[Legend, ...] = ()
  record_count: int = 0
  dropped_records: int = 0

  @property
  def groups(self) -> Tuple[str, ...]:
    """Distinct layer groups in layer order."""
    return tuple(dict.fromkeys(layer.group for layer in self.layers))

  def get_layer(self, name: str) -> Optional[RealizedLayer]:
    for layer in self.layers:
      if layer.name == name:
        return layer
    return None

  def get_legend(self, group: str) -> Optional[Legend]:
    for legend in self.legends:
      if legend.group == group:
        return legend
    return None


@dataclass(frozen=True)
class RenderResult:
  """Outcome of a render call.

  `document` is None exactly when `error` is set. Layer-level failures and
  per-record exclusions never abort the document; they are listed in
  `layer_errors` and `warnings`.
  """

  document: Optional[MapDocument] = None
  error: Optional[RenderError] = None
  layer_errors: Tuple[RenderError, ...] = ()
  warnings: Tuple[RenderError, ...] = ()

  @property
  def success(self) -> bool:
    return self.document is not None

  def summary(self) -> dict:
    """Plain-dict report for display or logging."""
    return {
        "success": self.success,
        "error": self.error.to_dict() if self.error else None,
        "layers": len(self.document.layers) if self.document else 0,
        "dropped_records": self.document.dropped_records if self.document else 0,
        "layer_errors": [e.to_dict() for e in self.layer_errors],
        "warnings": [w.to_dict() for w in self.warnings],
    }
