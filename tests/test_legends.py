"""Tests for legend descriptors."""

import pytest

from visualization.document import RealizedLayer
from visualization.legends import (
    bin_labels,
    build_legend,
    build_legends,
    format_break_label,
    parse_break_labels,
)
from visualization.specs import HeatmapLayer, QuantizedMarker, ThresholdMarker


def realized(spec, breaks=()):
    return RealizedLayer(
        name=spec.name,
        group=spec.group,
        kind=spec.kind,
        field=spec.field,
        visible=spec.visible_by_default,
        breaks=breaks,
    )


def test_format_break_label():
    assert format_break_label(1.0, 2.5) == "1.00 – 2.50"
    assert format_break_label(-3.5, 0.0, precision=1) == "-3.5 – 0.0"
    assert format_break_label(-3.14159, 0.0, precision=1) == "-3.14159 – 0.0"


def test_bin_labels_with_names():
    labels = bin_labels((0.0, 1.0, 2.0, 3.0), ("Low", "Medium", "High"))
    assert labels == ("Low (0.00 – 1.00)", "Medium (1.00 – 2.00)", "High (2.00 – 3.00)")


def test_small_edges_keep_their_digits():
    labels = bin_labels((0.001, 0.0025, 0.004))
    assert labels == ("0.001 – 0.0025", "0.0025 – 0.004")


def test_parse_break_labels_round_trips_named_and_plain():
    breaks = (-2.5, 0.0, 1 / 3, 12.25, 40.0)
    assert parse_break_labels(bin_labels(breaks)) == breaks
    assert parse_break_labels(bin_labels(breaks, ("a", "b", "c", "d"))) == breaks


def test_threshold_legend_uses_category_labels():
    spec = ThresholdMarker(
        field="THC_Prob",
        threshold=0.5,
        above_color="red",
        below_color="green",
        above_label="High",
        below_label="Low",
        group="Hemp",
        legend_title="THC",
    )
    legend = build_legend(spec, realized(spec))
    assert legend.title == "THC"
    assert legend.group == "Hemp"
    assert legend.colors == ("red", "green")
    assert legend.labels == ("High", "Low")


def test_threshold_default_labels():
    spec = ThresholdMarker(field="x", threshold=0.25, above_color="a", below_color="b")
    assert spec.above_label == "> 0.25"
    assert spec.below_label == "≤ 0.25"


def test_quantized_legend_uses_layer_breaks():
    spec = QuantizedMarker(field="rain", palette=("a", "b"), bin_names=("Dry", "Wet"))
    legend = build_legend(spec, realized(spec, breaks=(0.0, 5.0, 10.0)))
    assert legend.breaks == (0.0, 5.0, 10.0)
    assert legend.colors == ("a", "b")
    assert legend.labels == ("Dry (0.00 – 5.00)", "Wet (5.00 – 10.00)")


def test_heatmap_and_empty_quantized_have_no_legend():
    heat = HeatmapLayer(field="t", gradient=("blue", "red"))
    assert build_legend(heat, realized(heat)) is None

    quantized = QuantizedMarker(field="rain", palette=("a", "b"))
    assert build_legend(quantized, realized(quantized)) is None


def test_one_legend_per_group():
    first = QuantizedMarker(name="rain-a", group="Rain", field="rain", palette=("a", "b"))
    second = QuantizedMarker(name="rain-b", group="Rain", field="rain", palette=("c", "d"))
    heat = HeatmapLayer(name="heat", group="Heat", field="t", gradient=("blue", "red"))
    breaks = (0.0, 1.0, 2.0)

    legends = build_legends([
        (heat, realized(heat)),
        (first, realized(first, breaks)),
        (second, realized(second, breaks)),
    ])

    assert [lg.group for lg in legends] == ["Rain"]
    assert legends[0].colors == ("a", "b")
