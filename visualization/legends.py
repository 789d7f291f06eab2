"""Legend descriptors for discrete and binned layers."""

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from config.settings import settings
from visualization.document import Legend, RealizedLayer
from visualization.specs import LayerSpec, QuantizedMarker, ThresholdMarker

RANGE_SEPARATOR = " – "


def format_edge(value: float, precision: int = settings.map.popup_precision) -> str:
  """
  Print a bin edge with at least `precision` decimals and as many more as
  it takes for float(text) to give back the exact edge.
  """
  return np.format_float_positional(float(value), unique=True, trim="k", min_digits=precision)


def format_break_label(low: float, high: float, precision: int = settings.map.popup_precision) -> str:
  """Human-readable bin range, e.g. '12.50 – 30.00'."""
  return f"{format_edge(low, precision)}{RANGE_SEPARATOR}{format_edge(high, precision)}"


def bin_labels(
    breaks: Sequence[float],
    bin_names: Optional[Sequence[str]] = None,
    precision: int = settings.map.popup_precision,
) -> Tuple[str, ...]:
  """
  Build one label per bin from consecutive break pairs.

  Args:
      breaks: Bin edges (n_bins + 1)
      bin_names: Optional names such as Low/Medium/High
      precision: Minimum decimal places; edges that need more get more

  Returns:
      Tuple of labels; named bins read 'Low (1.00 – 2.00)'
  """
  ranges = [
      format_break_label(low, high, precision)
      for low, high in zip(breaks[:-1], breaks[1:])
  ]
  if not bin_names:
    return tuple(ranges)
  return tuple(f"{name} ({text})" for name, text in zip(bin_names, ranges))


def build_legend(spec: LayerSpec, layer: RealizedLayer) -> Optional[Legend]:
  """
  Build the legend for one realized layer.

  Threshold layers list their two categories; quantized layers list one
  swatch per bin using the layer's own breaks. Heatmaps, and quantized
  layers without usable values, have no legend.

  Args:
      spec: The LayerSpec the layer was built from
      layer: The realized layer

  Returns:
      Legend or None
  """
  title = spec.legend_title or spec.name

  if isinstance(spec, ThresholdMarker):
    return Legend(
        title=title,
        group=spec.group,
        colors=(spec.above_color, spec.below_color),
        labels=(spec.above_label, spec.below_label),
    )

  if isinstance(spec, QuantizedMarker) and layer.breaks:
    return Legend(
        title=title,
        group=spec.group,
        colors=tuple(spec.palette),
        labels=bin_labels(layer.breaks, spec.bin_names),
        breaks=layer.breaks,
    )

  return None


def build_legends(pairs: Iterable[Tuple[LayerSpec, RealizedLayer]]) -> Tuple[Legend, ...]:
  """
  Build at most one legend per group, from the first layer that has one.

  Args:
      pairs: (spec, realized layer) in document order

  Returns:
      Tuple of legends in group order
  """
  legends: List[Legend] = []
  seen_groups = set()

  for spec, layer in pairs:
    if spec.group in seen_groups:
      continue
    legend = build_legend(spec, layer)
    if legend is not None:
      legends.append(legend)
      seen_groups.add(spec.group)

  return tuple(legends)


def parse_break_labels(labels: Sequence[str]) -> Tuple[float, ...]:
  """
  Recover bin edges from labels produced by bin_labels.

  Useful for display collaborators that only kept the text.
  """
  edges: List[float] = []
  for label in labels:
    text = label[label.rfind("(") + 1:label.rfind(")")] if label.endswith(")") else label
    low, high = (float(part) for part in text.split(RANGE_SEPARATOR))
    if not edges:
      edges.append(low)
    edges.append(high)
  return tuple(edges)
