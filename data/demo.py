"""Synthetic farm records for the viewer and tests."""

from typing import Optional

import numpy as np
import pandas as pd

from config.settings import settings

CROPS = ["Hemp", "Corn", "Soybean", "Wheat"]


def generate_demo_farms(
    n_points: Optional[int] = None,
    seed: Optional[int] = None,
    center_lat: Optional[float] = None,
    center_lon: Optional[float] = None,
) -> pd.DataFrame:
  """
  Generate clustered farm records carrying every column the presets use.

  Args:
      n_points: Number of records (defaults to settings.data.demo_points)
      seed: Random seed (defaults to settings.data.demo_seed)
      center_lat: Cluster region center latitude
      center_lon: Cluster region center longitude

  Returns:
      DataFrame with latitude, longitude, Farm_ID, Crop, THC_Prob,
      Predicted_Yield, Precipitation_mm, Temp_C, Soil_pH, Disease_Risk,
      Infection_Count
  """
  n_points = settings.data.demo_points if n_points is None else n_points
  seed = settings.data.demo_seed if seed is None else seed
  center_lat = settings.map.center_lat if center_lat is None else center_lat
  center_lon = settings.map.center_lon if center_lon is None else center_lon

  rng = np.random.default_rng(seed)

  n_clusters = 8
  cluster_lat = rng.normal(center_lat, 0.6, n_clusters)
  cluster_lon = rng.normal(center_lon, 0.8, n_clusters)
  cluster_idx = rng.integers(0, n_clusters, n_points)

  lats = rng.normal(cluster_lat[cluster_idx], 0.08)
  lons = rng.normal(cluster_lon[cluster_idx], 0.08)

  precipitation = rng.gamma(shape=4.0, scale=20.0, size=n_points)
  temperature = rng.normal(24.0, 4.0, n_points)
  soil_ph = np.clip(rng.normal(6.5, 0.6, n_points), 4.5, 8.5)

  # Wetter, warmer fields carry more disease pressure
  risk_signal = 0.01 * precipitation + 0.05 * (temperature - 24.0)
  disease_risk = 1.0 / (1.0 + np.exp(-(risk_signal - 0.8 + rng.normal(0, 0.5, n_points))))

  return pd.DataFrame({
      "Farm_ID": [f"F{i + 1:04d}" for i in range(n_points)],
      "latitude": lats,
      "longitude": lons,
      "Crop": rng.choice(CROPS, size=n_points, p=[0.55, 0.2, 0.15, 0.1]),
      "THC_Prob": rng.beta(2.0, 3.0, n_points),
      "Predicted_Yield": rng.gamma(shape=6.0, scale=60.0, size=n_points),
      "Precipitation_mm": precipitation,
      "Temp_C": temperature,
      "Soil_pH": soil_ph,
      "Disease_Risk": disease_risk,
      "Infection_Count": rng.poisson(disease_risk * 40),
  })
