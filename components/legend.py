"""Legend and render report components."""

from html import escape
from typing import Iterable, Optional

import streamlit as st

from visualization.deck import to_rgba
from visualization.document import Legend, RenderResult


def color_to_hex(color) -> str:
  """Hex string for any color the engine accepts."""
  r, g, b, _ = to_rgba(color)
  return f"#{r:02x}{g:02x}{b:02x}"


def legend_to_html(legend: Legend) -> str:
  """
  Render a legend as a compact swatch list.

  Args:
      legend: Legend descriptor

  Returns:
      HTML fragment
  """
  rows = "".join(
      f"""
        <div class="legend-row">
            <span class="legend-dot" style="background:{color_to_hex(color)};"></span>
            <span>{escape(label)}</span>
        </div>"""
      for color, label in zip(legend.colors, legend.labels)
  )
  return f"""
      <div class="legend-card">
          <div class="legend-title">{escape(legend.title)}</div>{rows}
      </div>
  """


def render_legends(legends: Iterable[Legend], visible_groups: Optional[Iterable[str]] = None) -> None:
  """
  Render legends for the visible groups.

  Args:
      legends: Legend descriptors from the MapDocument
      visible_groups: Groups switched on; None shows every legend
  """
  groups = None if visible_groups is None else set(visible_groups)
  shown = [lg for lg in legends if groups is None or lg.group in groups]
  if not shown:
    return

  st.markdown(
      """
      <style>
      .legend-card {
          display: inline-block;
          vertical-align: top;
          margin: 0 12px 12px 0;
          padding: 10px 14px;
          border-radius: 8px;
          background: rgba(20, 20, 30, 0.9);
          border: 1px solid rgba(255, 255, 255, 0.1);
          color: #e2e8f0;
          font-size: 12px;
      }
      .legend-title {
          font-weight: 600;
          margin-bottom: 6px;
      }
      .legend-row {
          display: flex;
          align-items: center;
          line-height: 1.6;
      }
      .legend-dot {
          width: 10px;
          height: 10px;
          border-radius: 50%;
          margin-right: 8px;
      }
      </style>
      """,
      unsafe_allow_html=True,
  )
  st.markdown("".join(legend_to_html(lg) for lg in shown), unsafe_allow_html=True)


def render_report(result: RenderResult) -> None:
  """Show dropped records, failed layers and exclusions."""
  for error in result.layer_errors:
    st.warning(f"Layer skipped: {error.message}")
  for warning in result.warnings:
    st.caption(f"⚠️ {warning.message}")
