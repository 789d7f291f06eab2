# Components module
from .sidebar import render_sidebar
from .legend import render_legends, render_report

__all__ = ["render_sidebar", "render_legends", "render_report"]
