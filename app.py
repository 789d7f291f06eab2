"""
Fieldmap
Hemp farm and crop disease maps with PyDeck
"""

import sys
from pathlib import Path

import pandas as pd
import streamlit as st

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from config.logging_config import configure_logging, get_logger
from config.settings import settings
from components.legend import render_legends, render_report
from components.sidebar import render_sidebar
from data.demo import generate_demo_farms
from visualization.deck import to_deck
from visualization.map_view import render
from visualization.presets import get_preset
from visualization.specs import TileConfig

# Page configuration - must be first Streamlit command
st.set_page_config(
    page_title="Fieldmap | Hemp & Crop Disease",
    page_icon="🌿",
    layout="wide",
    initial_sidebar_state="expanded",
)

configure_logging()
logger = get_logger("app")


def inject_custom_css():
    """Inject custom CSS for the map page."""
    st.markdown(
        """
        <style>
        #MainMenu, footer {visibility: hidden;}

        .stApp {
            font-family: 'Space Grotesk', system-ui, sans-serif;
        }

        [data-testid="stSidebar"] {
            background: linear-gradient(180deg, rgba(10, 10, 15, 0.95), rgba(18, 18, 26, 0.95)) !important;
            border-right: 1px solid rgba(255, 255, 255, 0.08);
        }

        [data-testid="stSidebar"] [data-testid="stMarkdown"] {
            color: #f1f5f9;
        }

        .stats-row {
            display: flex;
            gap: 40px;
            margin-bottom: 12px;
        }

        .stat-value {
            font-size: 20px;
            font-weight: 700;
            color: #22c55e;
        }

        .stat-label {
            font-size: 11px;
            color: #94a3b8;
            text-transform: uppercase;
            letter-spacing: 0.5px;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


@st.cache_data
def load_demo_data(n_points: int) -> pd.DataFrame:
    """Cached demo records."""
    return generate_demo_farms(n_points=n_points)


def load_data(params: dict) -> pd.DataFrame:
    """
    Load records from the uploaded CSV, or demo data.

    Args:
        params: Sidebar parameters

    Returns:
        DataFrame of farm records (may be empty)
    """
    if params["data_source"] == "upload":
        uploaded = params.get("uploaded_file")
        if uploaded is None:
            return pd.DataFrame()
        try:
            return pd.read_csv(uploaded)
        except (ValueError, pd.errors.ParserError) as e:
            logger.warning(f"Could not read uploaded CSV: {e}")
            st.sidebar.warning(f"Could not read CSV: {e}")
            return pd.DataFrame()

    return load_demo_data(params["demo_points"])


def render_stats(total: int, plotted: int, layers: int, preset: str):
    """Render the stats row above the map."""
    st.markdown(
        f"""
        <div class="stats-row">
            <div><div class="stat-value">{total:,}</div><div class="stat-label">Records</div></div>
            <div><div class="stat-value">{plotted:,}</div><div class="stat-label">Plotted</div></div>
            <div><div class="stat-value">{layers}</div><div class="stat-label">Layers</div></div>
            <div><div class="stat-value">{preset.title()}</div><div class="stat-label">Map</div></div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def main():
    """Main application entry point."""
    inject_custom_css()
    params = render_sidebar()

    df = load_data(params)
    tile = TileConfig(
        url_template=settings.tiles.url_template,
        attribution=settings.tiles.attribution,
    )

    result = render(df, get_preset(params["preset"]), tile, zoom=params["zoom"])

    if not result.success:
        st.info(f"No data to map: {result.error.message}")
        render_report(result)
        return

    document = result.document
    render_stats(
        total=len(df),
        plotted=document.record_count,
        layers=len(document.layers),
        preset=params["preset"],
    )

    deck = to_deck(
        document,
        visible_groups=params["visible_groups"],
        opacity=params["opacity"],
    )
    st.pydeck_chart(deck, use_container_width=True, height=settings.map.map_height)
    st.caption(document.tile.attribution)

    render_legends(document.legends, params["visible_groups"])
    render_report(result)


if __name__ == "__main__":
    main()
