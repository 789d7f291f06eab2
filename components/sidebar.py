"""Sidebar component with data source, preset and layer toggles."""

from typing import Dict, List

import streamlit as st

from config.settings import settings
from visualization.presets import get_preset


PRESET_LABELS = {
    "hemp": "🌿 Hemp farms",
    "environmental": "🌦️ Environmental",
    "disease": "🦠 Crop disease",
}

DATA_SOURCE_LABELS = {
    "demo": "🧪 Demo data",
    "upload": "📄 Upload CSV",
}


def init_sidebar_state() -> None:
  """Initialize sidebar state with defaults."""
  defaults = {
      "preset": settings.presets[0],
      "data_source": "demo",
      "demo_points": settings.data.demo_points,
      "fit_bounds": False,
      "zoom": settings.map.default_zoom,
      "opacity": settings.map.default_opacity,
      "visible_groups": None,
  }

  for key, value in defaults.items():
    if key not in st.session_state:
      st.session_state[key] = value


def render_group_toggles(preset: str) -> List[str]:
  """
  Render one checkbox per layer group of the preset.

  Args:
      preset: Preset name

  Returns:
      Groups that are switched on
  """
  st.markdown("##### Layers")

  specs = get_preset(preset)
  defaults: Dict[str, bool] = {}
  for spec in specs:
    defaults.setdefault(spec.group, spec.visible_by_default)

  visible = []
  for group, default in defaults.items():
    if st.checkbox(group, value=default, key=f"group_{preset}_{group}"):
      visible.append(group)
  return visible


def render_sidebar() -> Dict:
  """
  Render the sidebar with all parameter controls.

  Returns:
      Dictionary with all selected parameters
  """
  init_sidebar_state()

  with st.sidebar:
    st.markdown(
        """
            <div style="
                padding: 16px 0;
                border-bottom: 1px solid rgba(255, 255, 255, 0.1);
                margin-bottom: 20px;
            ">
                <h1 style="
                    font-size: 22px;
                    font-weight: 700;
                    color: #22c55e;
                    margin: 0;
                    letter-spacing: -0.5px;
                ">Fieldmap</h1>
                <p style="
                    font-size: 12px;
                    color: #94a3b8;
                    margin: 4px 0 0 0;
                ">Hemp &amp; crop disease maps</p>
            </div>
            """,
        unsafe_allow_html=True,
    )

    # Data Source Selection
    st.markdown("##### Data Source")
    data_source = st.selectbox(
        "Data Source",
        options=list(DATA_SOURCE_LABELS.keys()),
        format_func=lambda x: DATA_SOURCE_LABELS[x],
        index=list(DATA_SOURCE_LABELS.keys()).index(st.session_state.data_source),
        key="data_source_select",
        label_visibility="collapsed",
    )
    st.session_state.data_source = data_source

    uploaded_file = None
    if data_source == "upload":
      uploaded_file = st.file_uploader("Farm records (CSV)", type=["csv"], key="csv_upload")
    else:
      st.session_state.demo_points = st.slider(
          "Demo Records",
          min_value=50,
          max_value=5000,
          value=st.session_state.demo_points,
          step=50,
          key="demo_points_slider",
      )

    st.markdown("<br>", unsafe_allow_html=True)

    # Preset Selection
    st.markdown("##### Map")
    preset = st.selectbox(
        "Map Preset",
        options=settings.presets,
        format_func=lambda x: PRESET_LABELS.get(x, x),
        index=settings.presets.index(st.session_state.preset),
        key="preset_select",
        label_visibility="collapsed",
    )
    st.session_state.preset = preset

    st.markdown("<br>", unsafe_allow_html=True)

    visible_groups = render_group_toggles(preset)
    st.session_state.visible_groups = visible_groups

    st.markdown("<br>", unsafe_allow_html=True)

    # View parameters
    st.markdown("##### View")
    fit_bounds = st.checkbox(
        "Fit to data",
        value=st.session_state.fit_bounds,
        key="fit_bounds_checkbox",
    )
    st.session_state.fit_bounds = fit_bounds

    if not fit_bounds:
      st.session_state.zoom = st.slider(
          "Zoom",
          min_value=settings.map.min_zoom,
          max_value=settings.map.max_zoom,
          value=st.session_state.zoom,
          step=1,
          key="zoom_slider",
      )

    st.session_state.opacity = st.slider(
        "Opacity",
        min_value=0.1,
        max_value=1.0,
        value=st.session_state.opacity,
        step=0.1,
        key="opacity_slider",
    )

  return {
      "preset": st.session_state.preset,
      "data_source": st.session_state.data_source,
      "uploaded_file": uploaded_file,
      "demo_points": st.session_state.demo_points,
      "visible_groups": st.session_state.visible_groups,
      "zoom": "fit" if st.session_state.fit_bounds else st.session_state.zoom,
      "opacity": st.session_state.opacity,
  }
