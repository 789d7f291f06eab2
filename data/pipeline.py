"""Dataset preparation: coordinate validation and numeric coercion."""

from typing import Iterable, List, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

from config.logging_config import get_logger
from config.settings import settings

logger = get_logger("data.pipeline")

# Canonical coordinate columns added to every prepared frame
LAT = "latitude"
LON = "longitude"

DatasetLike = Union[pd.DataFrame, Iterable[Mapping]]


def to_dataframe(dataset: DatasetLike) -> pd.DataFrame:
  """
  Accept a DataFrame or a sequence of record mappings.

  Args:
      dataset: DataFrame or iterable of dicts sharing one schema

  Returns:
      DataFrame (the input itself when it already is one)
  """
  if isinstance(dataset, pd.DataFrame):
    return dataset
  if dataset is None:
    return pd.DataFrame()
  return pd.DataFrame(list(dataset))


def _find_column(columns: pd.Index, candidates: List[str]) -> Optional[str]:
  """Return the first column matching a candidate name, ignoring case."""
  lowered = {str(c).lower(): c for c in columns}
  for name in candidates:
    if name.lower() in lowered:
      return lowered[name.lower()]
  return None


def resolve_coordinate_columns(
    df: pd.DataFrame,
    lat_col: Optional[str] = None,
    lon_col: Optional[str] = None,
) -> Tuple[Optional[str], Optional[str]]:
  """
  Work out which columns hold latitude and longitude.

  Explicit names win when present in the frame; otherwise the configured
  candidates (latitude/lat, longitude/lon/lng/long) are tried in order.

  Args:
      df: Input DataFrame
      lat_col: Explicit latitude column
      lon_col: Explicit longitude column

  Returns:
      (lat column, lon column); either may be None if not found
  """
  lat = lat_col if lat_col in df.columns else _find_column(df.columns, settings.data.latitude_columns)
  lon = lon_col if lon_col in df.columns else _find_column(df.columns, settings.data.longitude_columns)
  return lat, lon


def coerce_numeric(series: pd.Series) -> Tuple[pd.Series, pd.Series]:
  """
  Convert a column to floats.

  Infinite values (including strings such as "inf") count as non-numeric.

  Args:
      series: Input column of any dtype

  Returns:
      (numeric Series with NaN for unusable entries,
       boolean mask of entries that were present but not numeric)
  """
  numeric = pd.to_numeric(series, errors="coerce").astype(float).replace([np.inf, -np.inf], np.nan)
  non_numeric = numeric.isna() & series.notna()
  return numeric, non_numeric


def drop_invalid_coordinates(
    df: pd.DataFrame,
    lat_col: str,
    lon_col: str,
) -> pd.DataFrame:
  """
  Keep rows whose coordinates are numeric and inside the valid bounds.

  Adds float `latitude` / `longitude` columns to the result.

  Args:
      df: Input DataFrame
      lat_col: Latitude column
      lon_col: Longitude column

  Returns:
      Filtered DataFrame
  """
  lat, _ = coerce_numeric(df[lat_col])
  lon, _ = coerce_numeric(df[lon_col])

  lat_low, lat_high = settings.data.latitude_bounds
  lon_low, lon_high = settings.data.longitude_bounds

  # NaN fails both comparisons, so missing and non-numeric values drop out here
  mask = lat.between(lat_low, lat_high) & lon.between(lon_low, lon_high)

  return df.assign(**{LAT: lat, LON: lon})[mask]


def prepare_dataset(
    dataset: DatasetLike,
    lat_col: Optional[str] = None,
    lon_col: Optional[str] = None,
) -> Tuple[pd.DataFrame, int]:
  """
  Prepare a dataset for rendering.

  Steps:
  1. Convert to DataFrame
  2. Resolve coordinate columns
  3. Drop rows with missing or out-of-range coordinates

  When no coordinate columns can be found every row counts as invalid.

  Args:
      dataset: DataFrame or iterable of records
      lat_col: Explicit latitude column
      lon_col: Explicit longitude column

  Returns:
      (valid rows with canonical coordinate columns, number of dropped rows)
  """
  df = to_dataframe(dataset)
  initial_count = len(df)

  if df.empty:
    return df, 0

  lat, lon = resolve_coordinate_columns(df, lat_col, lon_col)
  if lat is None or lon is None:
    logger.warning(f"No coordinate columns found in {list(df.columns)}")
    return df.iloc[0:0], initial_count

  df = drop_invalid_coordinates(df, lat, lon).reset_index(drop=True)
  dropped = initial_count - len(df)

  if dropped:
    logger.warning(f"Dropped {dropped} of {initial_count} records with invalid coordinates")
  logger.debug(f"Prepared dataset: {len(df)} rows (lat={lat}, lon={lon})")

  return df, dropped

