"""Shared fixtures for the engine tests."""

import os
import sys

import pandas as pd
import pytest

# Add project root to path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from visualization.specs import TileConfig  # noqa: E402


@pytest.fixture
def tile():
    return TileConfig(
        url_template="https://tiles.example.test/{z}/{x}/{y}.png",
        attribution="Example tiles",
    )


@pytest.fixture
def hemp_records():
    """The two-farm example plus a few more plausible rows."""
    return [
        {"lat": 38.5, "lon": -90.2, "THC_Prob": 0.8, "Predicted_Yield": 400},
        {"lat": 38.6, "lon": -90.3, "THC_Prob": 0.3, "Predicted_Yield": 100},
    ]


@pytest.fixture
def farms():
    return pd.DataFrame({
        "latitude": [38.1, 38.4, 38.9, 39.2, 39.5, 38.7],
        "longitude": [-90.9, -90.5, -90.1, -89.8, -89.4, -90.0],
        "THC_Prob": [0.10, 0.50, 0.51, 0.95, 0.30, 0.70],
        "Predicted_Yield": [100.0, 225.0, 0.0, 400.0, 900.0, 49.0],
        "Precipitation_mm": [10.0, 20.0, 30.0, 40.0, 50.0, 60.0],
        "Temp_C": [18.0, 20.0, 22.0, 24.0, 26.0, 28.0],
        "Crop": ["Hemp"] * 6,
    })
