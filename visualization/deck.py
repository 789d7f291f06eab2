"""Turn a MapDocument into a PyDeck Deck."""

from html import escape
from typing import Dict, Iterable, List, Optional

import pydeck as pdk
from matplotlib import colors as mcolors

from config.settings import settings
from .document import MapDocument, PopupRows, RealizedLayer
from .specs import Color, TileConfig

_TOOLTIP_STYLE = {
    "backgroundColor": "transparent",
    "color": "white",
}


def to_rgba(color: Color, alpha: Optional[float] = None) -> List[int]:
    """
    Convert a color name, hex string or RGB(A) tuple to a 0-255 RGBA list.

    Args:
        color: 'green', '#31a354', (49, 163, 84) or (49, 163, 84, 200)
        alpha: Optional alpha override (0-1)

    Returns:
        [r, g, b, a]
    """
    if isinstance(color, (list, tuple)):
        values = [int(v) for v in color]
        if len(values) == 3:
            values.append(255)
        if alpha is not None:
            values[3] = round(alpha * 255)
        return values

    r, g, b, a = mcolors.to_rgba(color, alpha=alpha)
    return [round(r * 255), round(g * 255), round(b * 255), round(a * 255)]


def popup_to_html(rows: PopupRows) -> str:
    """Render popup rows as an HTML fragment."""
    return "<br/>".join(
        f"<b>{escape(label)}</b>: {escape(text)}" for label, text in rows
    )


def popup_to_text(rows: PopupRows) -> str:
    """Render popup rows as plain text, one per line."""
    return "\n".join(f"{label}: {text}" for label, text in rows)


def get_view_state(document: MapDocument, pitch: int = 0, bearing: int = 0) -> pdk.ViewState:
    """
    Create the initial view state from the document's center and zoom.

    Args:
        document: Rendered map document
        pitch: Tilt angle (0-60)
        bearing: Rotation angle

    Returns:
        PyDeck ViewState object
    """
    latitude, longitude = document.center
    return pdk.ViewState(
        latitude=latitude,
        longitude=longitude,
        zoom=document.zoom,
        pitch=pitch,
        bearing=bearing,
    )


def create_tile_layer(tile: TileConfig) -> pdk.Layer:
    """Basemap raster tiles from the caller's URL template."""
    return pdk.Layer(
        "TileLayer",
        data=tile.url_template,
        id="basemap",
        min_zoom=0,
        max_zoom=19,
        tile_size=256,
    )


def create_marker_layer(layer: RealizedLayer, visible: bool, opacity: float) -> pdk.Layer:
    """ScatterplotLayer with per-marker color, pixel radius and popup."""
    data = [
        {
            "lat": marker.latitude,
            "lon": marker.longitude,
            "color": to_rgba(marker.color),
            "radius": marker.radius,
            "value": marker.value,
            "popup_html": popup_to_html(marker.popup),
        }
        for marker in layer.markers
    ]

    return pdk.Layer(
        "ScatterplotLayer",
        data=data,
        id=layer.name,
        get_position="[lon, lat]",
        get_fill_color="color",
        get_radius="radius",
        radius_units="pixels",
        radius_min_pixels=1,
        opacity=opacity,
        visible=visible,
        pickable=True,
        auto_highlight=True,
    )


def create_heat_layer(layer: RealizedLayer, visible: bool, opacity: float) -> pdk.Layer:
    """HeatmapLayer weighted by rescaled intensity."""
    data = [
        {"lat": point.latitude, "lon": point.longitude, "intensity": point.intensity}
        for point in layer.heat_points
    ]

    # deck.gl has no separate blur; the kernel spreads over radius + blur
    radius_pixels = int((layer.radius or settings.map.heat_radius) + (layer.blur or 0))

    return pdk.Layer(
        "HeatmapLayer",
        data=data,
        id=layer.name,
        get_position="[lon, lat]",
        get_weight="intensity",
        radius_pixels=radius_pixels,
        color_range=[to_rgba(color)[:3] for _, color in layer.gradient],
        aggregation="SUM",
        opacity=opacity,
        visible=visible,
        pickable=False,
    )


def build_deck_layers(
    document: MapDocument,
    visible_groups: Optional[Iterable[str]] = None,
    opacity: Optional[float] = None,
) -> List[pdk.Layer]:
    """
    Build PyDeck layers in document order, basemap first.

    Args:
        document: Rendered map document
        visible_groups: Groups to show; None keeps each layer's default
        opacity: Layer opacity (defaults to settings.map.default_opacity)

    Returns:
        List of PyDeck layers
    """
    if opacity is None:
        opacity = settings.map.default_opacity
    groups = None if visible_groups is None else set(visible_groups)

    deck_layers = [create_tile_layer(document.tile)]
    for layer in document.layers:
        visible = layer.visible if groups is None else layer.group in groups
        if layer.kind == "heatmap":
            deck_layers.append(create_heat_layer(layer, visible, opacity))
        else:
            deck_layers.append(create_marker_layer(layer, visible, opacity))

    return deck_layers


def get_tooltip_config() -> Dict:
    """Tooltip showing the popup rows of the hovered marker."""
    return {
        "html": """
            <div style="
                background: rgba(20, 20, 30, 0.95);
                padding: 10px 14px;
                border-radius: 8px;
                border: 1px solid rgba(255, 255, 255, 0.1);
                font-family: 'Inter', system-ui, sans-serif;
                font-size: 12px;
                line-height: 1.5;
                max-width: 280px;
            ">{popup_html}</div>
        """,
        "style": _TOOLTIP_STYLE,
    }


def to_deck(
    document: MapDocument,
    visible_groups: Optional[Iterable[str]] = None,
    opacity: Optional[float] = None,
) -> pdk.Deck:
    """
    Build a PyDeck Deck for a MapDocument.

    Args:
        document: Rendered map document
        visible_groups: Groups to show; None keeps each layer's default
        opacity: Marker/heat layer opacity

    Returns:
        PyDeck Deck with the caller's tiles as basemap
    """
    return pdk.Deck(
        layers=build_deck_layers(document, visible_groups, opacity),
        initial_view_state=get_view_state(document),
        tooltip=get_tooltip_config(),
        map_provider=None,
        map_style=None,
    )
