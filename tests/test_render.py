"""End-to-end tests for render()."""

import dataclasses

import pandas as pd
import pytest

import visualization.map_view as map_view
from data.demo import generate_demo_farms
from utils.scaling import assign_bins
from visualization.errors import (
    EmptyDataset,
    InvalidCoordinate,
    NonNumericValue,
    PopupFormatError,
    UnknownField,
    UnsupportedLayer,
)
from visualization.legends import parse_break_labels
from visualization.map_view import render, zoom_for_bounds
from visualization.specs import (
    HeatmapLayer,
    LayerSpec,
    PopupField,
    QuantizedMarker,
    ThresholdMarker,
)


def thc_marker(**overrides):
    options = dict(
        name="THC",
        field="THC_Prob",
        threshold=0.5,
        above_color="green",
        below_color="red",
        radius_field="Predicted_Yield",
        radius_fn="sqrt",
        radius_scale=0.1,
    )
    options.update(overrides)
    return ThresholdMarker(**options)


def test_worked_example(hemp_records, tile):
    result = render(hemp_records, [thc_marker()], tile)

    assert result.success
    layer = result.document.get_layer("THC")
    assert [m.color for m in layer.markers] == ["green", "red"]
    assert [m.radius for m in layer.markers] == pytest.approx([2.0, 1.0])


def test_center_is_mean_and_within_bounds(tile):
    df = generate_demo_farms(n_points=300, seed=11)
    result = render(df, [thc_marker()], tile)
    document = result.document

    lat, lon = document.center
    assert lat == pytest.approx(df["latitude"].mean())
    assert lon == pytest.approx(df["longitude"].mean())

    (min_lat, min_lon), (max_lat, max_lon) = document.bounds
    assert min_lat <= lat <= max_lat
    assert min_lon <= lon <= max_lon
    assert min_lat == pytest.approx(df["latitude"].min())


def test_invalid_coordinates_excluded_from_center(tile):
    records = [
        {"lat": 10.0, "lon": 20.0, "THC_Prob": 0.1, "Predicted_Yield": 1},
        {"lat": 20.0, "lon": 30.0, "THC_Prob": 0.9, "Predicted_Yield": 1},
        {"lat": None, "lon": 0.0, "THC_Prob": 0.9, "Predicted_Yield": 1},
        {"lat": 120.0, "lon": 0.0, "THC_Prob": 0.9, "Predicted_Yield": 1},
    ]
    result = render(records, [thc_marker()], tile)

    assert result.document.center == pytest.approx((15.0, 25.0))
    assert result.document.dropped_records == 2
    assert result.document.record_count == 2
    assert any(isinstance(w, InvalidCoordinate) and w.count == 2 for w in result.warnings)


def test_empty_dataset_short_circuits(tile, monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("center must not be computed for empty input")

    monkeypatch.setattr(map_view, "compute_center", fail)

    for dataset in ([], pd.DataFrame(), [{"lat": 200.0, "lon": 0.0, "THC_Prob": 0.1}]):
        result = render(dataset, [thc_marker()], tile)
        assert not result.success
        assert result.document is None
        assert isinstance(result.error, EmptyDataset)


def test_unknown_field_fails_only_that_layer(farms, tile):
    layers = [
        thc_marker(),
        HeatmapLayer(name="Ghost", field="Nitrogen", gradient=("blue", "red")),
        HeatmapLayer(name="Temperature", field="Temp_C", gradient=("blue", "red")),
    ]
    result = render(farms, layers, tile)

    assert result.success
    assert [layer.name for layer in result.document.layers] == ["THC", "Temperature"]
    assert len(result.layer_errors) == 1
    error = result.layer_errors[0]
    assert isinstance(error, UnknownField)
    assert error.layer == "Ghost"
    assert error.field == "Nitrogen"


def test_non_numeric_values_reported(tile):
    records = [
        {"lat": 1.0, "lon": 1.0, "THC_Prob": 0.9, "Predicted_Yield": 4},
        {"lat": 2.0, "lon": 2.0, "THC_Prob": "unknown", "Predicted_Yield": 4},
    ]
    result = render(records, [thc_marker()], tile)

    assert len(result.document.get_layer("THC").markers) == 1
    warnings = [w for w in result.warnings if isinstance(w, NonNumericValue)]
    assert len(warnings) == 1
    assert warnings[0].layer == "THC"
    assert warnings[0].count == 1


def test_quantized_legend_matches_marker_colors(tile):
    df = generate_demo_farms(n_points=250, seed=5)
    palette = ("#deebf7", "#9ecae1", "#3182bd", "#08519c")
    spec = QuantizedMarker(
        name="Rain",
        field="Precipitation_mm",
        palette=palette,
        bin_names=("Low", "Medium", "High", "Very high"),
    )
    result = render(df, [spec], tile)
    layer = result.document.get_layer("Rain")
    legend = result.document.get_legend("Rain")

    assert legend.breaks == layer.breaks
    assert legend.colors == palette
    assert parse_break_labels(legend.labels) == layer.breaks

    values = pd.Series([m.value for m in layer.markers])
    expected = [palette[i] for i in assign_bins(values, pd.Series(legend.breaks).to_numpy())]
    assert [m.color for m in layer.markers] == expected


def test_small_valued_legend_labels_bin_like_the_markers(tile):
    records = [
        {"lat": 1.0, "lon": 1.0, "p": 0.001},
        {"lat": 1.0, "lon": 2.0, "p": 0.002},
        {"lat": 2.0, "lon": 1.0, "p": 0.003},
        {"lat": 2.0, "lon": 2.0, "p": 0.004},
    ]
    spec = QuantizedMarker(name="P", field="p", palette=("a", "b"), method="linear")
    document = render(records, [spec], tile).document
    layer = document.get_layer("P")
    legend = document.get_legend("P")

    edges = parse_break_labels(legend.labels)
    assert edges == layer.breaks
    values = pd.Series([m.value for m in layer.markers])
    assert [m.color for m in layer.markers] == ["a", "a", "b", "b"]
    assert [spec.palette[i] for i in assign_bins(values, pd.Series(edges).to_numpy())] == ["a", "a", "b", "b"]


def test_infinite_values_are_excluded_from_heatmap(tile):
    records = [
        {"lat": 1.0, "lon": 1.0, "t": 1.0},
        {"lat": 1.0, "lon": 2.0, "t": "inf"},
        {"lat": 2.0, "lon": 1.0, "t": float("-inf")},
        {"lat": 2.0, "lon": 2.0, "t": 3.0},
    ]
    spec = HeatmapLayer(name="T", field="t", gradient=("blue", "red"))
    result = render(records, [spec], tile)
    layer = result.document.get_layer("T")

    assert [p.intensity for p in layer.heat_points] == [0.0, 1.0]
    assert layer.excluded_count == 2
    assert [w.count for w in result.warnings if isinstance(w, NonNumericValue)] == [2]


def test_failing_popup_formatter_fails_only_that_layer(farms, tile):
    def broken(value):
        raise ValueError("bad value")

    layers = [
        thc_marker(name="Broken", popup=(PopupField("THC", "THC_Prob", formatter=broken),)),
        thc_marker(name="THC"),
    ]
    result = render(farms, layers, tile)

    assert result.success
    assert [layer.name for layer in result.document.layers] == ["THC"]
    assert len(result.layer_errors) == 1
    assert isinstance(result.layer_errors[0], PopupFormatError)
    assert result.layer_errors[0].layer == "Broken"
    assert result.layer_errors[0].field == "THC_Prob"


def test_unsupported_spec_fails_only_that_layer(farms, tile):
    result = render(farms, [LayerSpec(field="THC_Prob"), thc_marker()], tile)

    assert result.success
    assert [layer.name for layer in result.document.layers] == ["THC"]
    assert isinstance(result.layer_errors[0], UnsupportedLayer)


def test_layer_order_visibility_and_groups(farms, tile):
    layers = [
        thc_marker(group="Hemp"),
        HeatmapLayer(name="Temperature", group="Climate", field="Temp_C",
                     gradient=("blue", "red"), visible_by_default=False),
    ]
    document = render(farms, layers, tile).document

    assert document.groups == ("Hemp", "Climate")
    assert [layer.visible for layer in document.layers] == [True, False]
    assert document.tile is tile
    assert [lg.group for lg in document.legends] == ["Hemp"]


def test_default_and_explicit_zoom(farms, tile):
    assert render(farms, [], tile).document.zoom == map_view.settings.map.default_zoom
    assert render(farms, [], tile, zoom=11).document.zoom == 11.0


def test_fit_zoom(farms, tile):
    document = render(farms, [], tile, zoom="fit").document
    assert document.zoom == zoom_for_bounds(document.bounds)


def test_zoom_for_bounds():
    # 180 / 1.4 is about 128.6, so latitude limits the zoom to 7
    assert zoom_for_bounds(((38.0, -90.0), (39.4, -89.9)), padding=0) == 7.0
    # a single point zooms all the way in
    assert zoom_for_bounds(((1.0, 1.0), (1.0, 1.0))) == map_view.settings.map.max_zoom


def test_document_is_immutable(farms, tile):
    document = render(farms, [thc_marker()], tile).document
    with pytest.raises(dataclasses.FrozenInstanceError):
        document.zoom = 3
    assert isinstance(document.layers, tuple)


def test_render_does_not_touch_input(farms, tile):
    before = farms.copy()
    render(farms, [thc_marker()], tile)
    pd.testing.assert_frame_equal(farms, before)


def test_summary(farms, tile):
    summary = render(farms, [thc_marker(field="Nope")], tile).summary()
    assert summary["success"] is True
    assert summary["layers"] == 0
    assert summary["layer_errors"][0]["code"] == "unknown_field"
