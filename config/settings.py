"""Application configuration settings."""

import os
from dataclasses import dataclass, field
from typing import List, Tuple

from dotenv import load_dotenv

load_dotenv()


@dataclass
class MapConfig:
    """Map view and styling defaults."""

    # Fallback center (St. Louis region) used by the demo generator
    center_lat: float = 38.6
    center_lon: float = -90.3
    default_zoom: int = 7
    min_zoom: int = 1
    max_zoom: int = 18

    # Marker defaults
    default_marker_radius: float = 6.0
    min_radius: float = 0.5
    popup_precision: int = 2

    # Heatmap defaults
    heat_radius: int = 25
    heat_blur: int = 15

    # Viewer
    map_height: int = 700
    default_opacity: float = 0.8


@dataclass
class TileSettings:
    """Basemap used by the viewer when the caller supplies none."""

    url_template: str = field(
        default_factory=lambda: os.getenv(
            "TILE_URL_TEMPLATE", "https://tile.openstreetmap.org/{z}/{x}/{y}.png"
        )
    )
    attribution: str = field(
        default_factory=lambda: os.getenv(
            "TILE_ATTRIBUTION", "© OpenStreetMap contributors"
        )
    )


@dataclass
class DataConfig:
    """Dataset column conventions and demo data sizing."""

    latitude_columns: List[str] = field(
        default_factory=lambda: ["latitude", "lat"]
    )
    longitude_columns: List[str] = field(
        default_factory=lambda: ["longitude", "lon", "lng", "long"]
    )
    latitude_bounds: Tuple[float, float] = (-90.0, 90.0)
    longitude_bounds: Tuple[float, float] = (-180.0, 180.0)

    demo_points: int = 400
    demo_seed: int = 42


@dataclass
class Settings:
    """Main application settings."""

    map: MapConfig = field(default_factory=MapConfig)
    tiles: TileSettings = field(default_factory=TileSettings)
    data: DataConfig = field(default_factory=DataConfig)

    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_to_file: bool = field(
        default_factory=lambda: os.getenv("LOG_TO_FILE", "false").lower() == "true"
    )

    # Preset names available in the viewer
    presets: List[str] = field(
        default_factory=lambda: ["hemp", "environmental", "disease"]
    )


# Singleton settings instance
settings = Settings()
