"""Ready-made layer lists for the hemp, environmental and disease maps."""

from typing import Callable, Dict, List

from .specs import HeatmapLayer, LayerSpec, PopupField, QuantizedMarker, ThresholdMarker

HEMP_GROUP = "Hemp farms"
PRECIPITATION_GROUP = "Precipitation"
TEMPERATURE_GROUP = "Temperature"
SOIL_GROUP = "Soil pH"
DISEASE_GROUP = "Disease risk"
INFECTION_GROUP = "Infection density"

BLUES = ("#deebf7", "#9ecae1", "#3182bd")
SOIL_PH_PALETTE = ("#d7191c", "#fdae61", "#ffffbf", "#a6d96a", "#1a9641")
HEAT_GRADIENT = ("blue", "lime", "yellow", "red")
INFECTION_GRADIENT = ("#ffffb2", "#fecc5c", "#fd8d3c", "#e31a1c")


def hemp_layers() -> List[LayerSpec]:
  """THC probability markers sized by predicted yield."""
  return [
      ThresholdMarker(
          name="THC probability",
          group=HEMP_GROUP,
          field="THC_Prob",
          threshold=0.5,
          above_color="red",
          below_color="green",
          above_label="High THC risk (> 0.5)",
          below_label="Compliant (≤ 0.5)",
          radius_field="Predicted_Yield",
          radius_fn="sqrt",
          radius_scale=0.1,
          min_radius=2.0,
          popup=(
              PopupField("THC probability", "THC_Prob"),
              PopupField("Predicted yield", "Predicted_Yield"),
          ),
          legend_title="THC probability",
      ),
  ]


def environmental_layers() -> List[LayerSpec]:
  """Hemp markers plus precipitation, temperature and soil overlays."""
  return hemp_layers() + [
      QuantizedMarker(
          name="Precipitation",
          group=PRECIPITATION_GROUP,
          field="Precipitation_mm",
          palette=BLUES,
          method="quantile",
          bin_names=("Low", "Medium", "High"),
          radius=5,
          popup=(PopupField("Precipitation (mm)", "Precipitation_mm", precision=1),),
          legend_title="Precipitation (mm)",
      ),
      HeatmapLayer(
          name="Temperature",
          group=TEMPERATURE_GROUP,
          field="Temp_C",
          gradient=HEAT_GRADIENT,
          radius=20,
          blur=15,
          visible_by_default=False,
      ),
      QuantizedMarker(
          name="Soil pH",
          group=SOIL_GROUP,
          field="Soil_pH",
          palette=SOIL_PH_PALETTE,
          method="linear",
          radius=4,
          popup=(PopupField("Soil pH", "Soil_pH", precision=1),),
          visible_by_default=False,
      ),
  ]


def disease_layers() -> List[LayerSpec]:
  """Disease risk markers sized by infection count, plus infection heat."""
  return [
      ThresholdMarker(
          name="Disease risk",
          group=DISEASE_GROUP,
          field="Disease_Risk",
          threshold=0.5,
          above_color="darkred",
          below_color="#2b8cbe",
          above_label="High risk (> 0.5)",
          below_label="Low risk (≤ 0.5)",
          radius_field="Infection_Count",
          radius_fn="sqrt",
          radius_scale=1.5,
          min_radius=2.0,
          popup=(
              PopupField("Disease risk", "Disease_Risk"),
              PopupField("Infections", "Infection_Count", precision=0),
              PopupField("Precipitation (mm)", "Precipitation_mm", precision=1),
              PopupField("Temperature (°C)", "Temp_C", precision=1),
          ),
      ),
      HeatmapLayer(
          name="Infection density",
          group=INFECTION_GROUP,
          field="Infection_Count",
          gradient=INFECTION_GRADIENT,
          radius=25,
          blur=20,
      ),
  ]


PRESETS: Dict[str, Callable[[], List[LayerSpec]]] = {
    "hemp": hemp_layers,
    "environmental": environmental_layers,
    "disease": disease_layers,
}


def get_preset(name: str) -> List[LayerSpec]:
  """
  Build the layer list for a named preset.

  Args:
      name: 'hemp', 'environmental' or 'disease'

  Returns:
      Fresh list of LayerSpecs
  """
  try:
    return PRESETS[name]()
  except KeyError:
    raise ValueError(f"Unknown preset '{name}'. Expected one of {sorted(PRESETS)}.") from None
