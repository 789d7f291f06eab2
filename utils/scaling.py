"""Value scaling, binning and formatting helpers for layer styling."""

from typing import Callable, Optional, Tuple, Union

import numpy as np
import pandas as pd


RadiusFunction = Callable[[np.ndarray], np.ndarray]

RADIUS_FUNCTIONS = {
    "sqrt": np.sqrt,
    "linear": lambda values: values,
    "log1p": np.log1p,
}

BINNING_METHODS = ("quantile", "linear")


def resolve_radius_fn(radius_fn: Union[str, RadiusFunction]) -> RadiusFunction:
    """
    Look up a named radius function, or pass a callable through.

    Args:
        radius_fn: 'sqrt', 'linear', 'log1p' or a vectorized callable

    Returns:
        Callable mapping an array of values to an array of radii
    """
    if callable(radius_fn):
        return radius_fn
    try:
        return RADIUS_FUNCTIONS[radius_fn]
    except KeyError:
        raise ValueError(
            f"Unknown radius function '{radius_fn}'. "
            f"Expected one of {sorted(RADIUS_FUNCTIONS)} or a callable."
        ) from None


def scale_radius(
    values: pd.Series,
    radius_fn: Union[str, RadiusFunction] = "sqrt",
    scale: float = 1.0,
    min_radius: float = 0.5,
) -> np.ndarray:
    """
    Map a numeric column to marker radii.

    Missing, zero and negative inputs (and anything the function turns into
    NaN or inf) get min_radius.

    Args:
        values: Numeric Series (NaN allowed)
        radius_fn: Radius function name or callable
        scale: Multiplier applied after the function
        min_radius: Smallest allowed radius, must be positive

    Returns:
        Array of radii, one per input value
    """
    fn = resolve_radius_fn(radius_fn)
    raw = values.to_numpy(dtype=float)

    with np.errstate(invalid="ignore", divide="ignore"):
        radii = np.asarray(fn(raw), dtype=float) * scale

    usable = np.isfinite(radii) & (radii > min_radius)
    return np.where(usable, radii, min_radius)


def rescale(
    values: pd.Series,
    value_range: Optional[Tuple[float, float]] = None,
) -> np.ndarray:
    """
    Linearly rescale values into [0, 1].

    Uses the column's own min/max unless value_range is given, in which
    case results are clipped to [0, 1]. A constant column maps to 0.5.

    Args:
        values: Numeric Series without NaN
        value_range: Optional (low, high) normalization domain

    Returns:
        Array of intensities in [0, 1]
    """
    raw = values.to_numpy(dtype=float)
    if raw.size == 0:
        return raw

    if value_range is None:
        low, high = float(raw.min()), float(raw.max())
    else:
        low, high = value_range

    span = high - low
    if span == 0:
        return np.full(raw.shape, 0.5)

    return np.clip((raw - low) / span, 0.0, 1.0)


def compute_bin_edges(values: pd.Series, n_bins: int, method: str = "quantile") -> np.ndarray:
    """
    Compute n_bins + 1 bin edges over a numeric column.

    Args:
        values: Numeric Series without NaN (must be non-empty)
        n_bins: Number of bins (palette size)
        method: 'quantile' for equal-count breaks, 'linear' for equal-width

    Returns:
        Monotonic array of n_bins + 1 edges
    """
    if method not in BINNING_METHODS:
        raise ValueError(f"Unknown binning method '{method}'. Expected one of {BINNING_METHODS}.")

    raw = values.to_numpy(dtype=float)

    if method == "quantile":
        return np.quantile(raw, np.linspace(0.0, 1.0, n_bins + 1))

    return np.linspace(raw.min(), raw.max(), n_bins + 1)


def assign_bins(values: pd.Series, edges: np.ndarray) -> np.ndarray:
    """
    Assign each value to a bin index given edges from compute_bin_edges.

    Bins are right-closed, the lowest bin is closed on both ends, and values
    outside [edges[0], edges[-1]] land in the nearest edge bin.

    Args:
        values: Numeric Series
        edges: Bin edges (length n_bins + 1)

    Returns:
        Integer array of bin indices in [0, n_bins - 1]
    """
    n_bins = len(edges) - 1
    inner = edges[1:-1]
    indices = np.searchsorted(inner, values.to_numpy(dtype=float), side="left")
    return np.clip(indices, 0, n_bins - 1)


def format_number(value, precision: int = 2) -> str:
    """
    Format a popup/legend value.

    Integers stay integers, real values are rounded to `precision` decimals,
    anything else is returned as text.
    """
    if value is None:
        return ""
    if isinstance(value, (bool, np.bool_)):
        return str(value)
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    if isinstance(value, (float, np.floating)):
        if np.isnan(value):
            return ""
        return f"{float(value):.{precision}f}"
    return str(value)
