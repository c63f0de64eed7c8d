from __future__ import annotations

import unittest

import numpy as np

from catplot import CATEGORIES_PLUGIN, Plot, plot
from catplot.categories import (
    AbsentCategories,
    ExplicitCategories,
    SequenceCategories,
    build_category_mapping,
    category_tick_generator,
    negotiate_format,
    next_category_index,
    process_datapoints,
    resolve_category_source,
    transform_points_on_axis,
)
from catplot.format import ColumnFormat
from catplot.hooks import PROCESS_DATAPOINTS, PROCESS_RAW_DATA
from catplot.options import AxisOptions, BarsOptions
from catplot.series import Axis, Datapoints, Series


def _series(*, x_mode: str | None = None, y_mode: str | None = None, **kwargs) -> Series:
    return Series(
        data=kwargs.pop("data", []),
        xaxis=Axis("xaxis", AxisOptions(mode=x_mode)),
        yaxis=Axis("yaxis", AxisOptions(mode=y_mode)),
        **kwargs,
    )


class CategorySourceTests(unittest.TestCase):
    def test_list_resolves_to_sequence(self) -> None:
        source = resolve_category_source(["Feb", "Mar", "Apr"])
        self.assertEqual(source, SequenceCategories(("Feb", "Mar", "Apr")))

    def test_mapping_resolves_to_explicit(self) -> None:
        source = resolve_category_source({"Feb": 1, "Mar": 3})
        self.assertIsInstance(source, ExplicitCategories)
        self.assertEqual(source.mapping, {"Feb": 1, "Mar": 3})

    def test_numpy_labels_resolve_to_sequence(self) -> None:
        source = resolve_category_source(np.asarray(["a", "b"]))
        self.assertEqual(source, SequenceCategories(("a", "b")))

    def test_missing_or_malformed_resolve_to_absent(self) -> None:
        self.assertIsInstance(resolve_category_source(None), AbsentCategories)
        self.assertIsInstance(resolve_category_source(5), AbsentCategories)
        self.assertIsInstance(resolve_category_source("Feb"), AbsentCategories)

    def test_explicit_entries_with_non_numeric_positions_are_dropped(self) -> None:
        source = resolve_category_source({"Feb": 1, "Mar": "three", "Apr": True})
        self.assertEqual(source.mapping, {"Feb": 1})

    def test_sequence_mapping_numbers_labels_by_position(self) -> None:
        mapping = build_category_mapping(resolve_category_source(["Feb", "Mar", "Apr"]))
        self.assertEqual(list(mapping.items()), [("Feb", 0), ("Mar", 1), ("Apr", 2)])

    def test_explicit_mapping_is_copied_verbatim_with_duplicate_positions(self) -> None:
        raw = {"Feb": 1, "Mar": 1}
        mapping = build_category_mapping(resolve_category_source(raw))
        self.assertEqual(mapping, {"Feb": 1, "Mar": 1})
        mapping["Apr"] = 2
        self.assertNotIn("Apr", raw)

    def test_absent_mapping_is_empty(self) -> None:
        self.assertEqual(build_category_mapping(AbsentCategories()), {})


class NextIndexTests(unittest.TestCase):
    def test_empty_mapping_starts_at_zero(self) -> None:
        self.assertEqual(next_category_index({}), 0)

    def test_next_index_follows_current_maximum(self) -> None:
        self.assertEqual(next_category_index({"Feb": 1, "Mar": 3}), 4)
        self.assertEqual(next_category_index({"a": 2.5}), 3.5)

    def test_negative_positions_still_start_at_zero(self) -> None:
        self.assertEqual(next_category_index({"a": -3}), 0)


class FormatNegotiationTests(unittest.TestCase):
    def test_numeric_axes_are_left_alone(self) -> None:
        series = _series()
        datapoints = Datapoints()
        negotiate_format(series, datapoints)
        self.assertIsNone(datapoints.format)

    def test_x_category_clears_x_number_flag_only(self) -> None:
        series = _series(x_mode="category")
        datapoints = Datapoints()
        negotiate_format(series, datapoints)
        fmt = datapoints.format
        self.assertEqual(len(fmt), 2)
        self.assertFalse(fmt[0].number)
        self.assertTrue(fmt[0].compute_range)
        self.assertTrue(fmt[1].number)
        self.assertTrue(fmt[1].compute_range)

    def test_y_category_clears_y_number_and_range_flags(self) -> None:
        series = _series(y_mode="category")
        datapoints = Datapoints()
        negotiate_format(series, datapoints)
        fmt = datapoints.format
        self.assertTrue(fmt[0].number)
        self.assertFalse(fmt[1].number)
        self.assertFalse(fmt[1].compute_range)

    def test_existing_format_is_mutated_in_place(self) -> None:
        fmt = [ColumnFormat(x=True), ColumnFormat(y=True), ColumnFormat(y=True, required=False, default_value=0)]
        datapoints = Datapoints(format=fmt)
        negotiate_format(_series(y_mode="category"), datapoints)
        self.assertIs(datapoints.format, fmt)
        self.assertFalse(fmt[2].number)
        self.assertFalse(fmt[2].compute_range)

    def test_vertical_bars_get_y_baseline_column(self) -> None:
        series = _series(x_mode="category", bars=BarsOptions(show=True))
        datapoints = Datapoints()
        negotiate_format(series, datapoints)
        baseline = datapoints.format[2]
        self.assertTrue(baseline.y)
        self.assertFalse(baseline.x)
        self.assertTrue(baseline.number)
        self.assertFalse(baseline.required)
        self.assertEqual(baseline.default_value, 0)

    def test_horizontal_bars_get_x_baseline_column(self) -> None:
        series = _series(y_mode="category", bars=BarsOptions(show=True, horizontal=True))
        datapoints = Datapoints()
        negotiate_format(series, datapoints)
        baseline = datapoints.format[2]
        self.assertTrue(baseline.x)
        self.assertFalse(baseline.y)
        self.assertTrue(baseline.number)
        self.assertFalse(datapoints.format[1].number)


class TransformPointsTests(unittest.TestCase):
    def test_labels_are_numbered_in_first_seen_order(self) -> None:
        datapoints = Datapoints(
            points=["b", 1, "a", 2, "b", 3, "c", 4],
            pointsize=2,
            format=[ColumnFormat(x=True, number=False), ColumnFormat(y=True)],
        )
        mapping: dict[str, float] = {}
        transform_points_on_axis(datapoints, "xaxis", mapping)
        self.assertEqual(list(mapping.items()), [("b", 0), ("a", 1), ("c", 2)])
        self.assertEqual(datapoints.points, [0, 1, 1, 2, 0, 3, 2, 4])

    def test_null_values_and_skipped_records_are_preserved(self) -> None:
        datapoints = Datapoints(
            points=["a", 1, None, None, "b", None],
            pointsize=2,
            format=[ColumnFormat(x=True, number=False), ColumnFormat(y=True, required=False)],
        )
        mapping: dict[str, float] = {}
        transform_points_on_axis(datapoints, "xaxis", mapping)
        self.assertEqual(datapoints.points, [0, 1, None, None, 1, None])
        self.assertEqual(mapping, {"a": 0, "b": 1})

    def test_null_category_value_is_not_assigned(self) -> None:
        datapoints = Datapoints(
            points=[1, "lo", 2, None, 3, "hi"],
            pointsize=2,
            format=[ColumnFormat(x=True), ColumnFormat(y=True, number=False, required=False)],
        )
        mapping: dict[str, float] = {}
        transform_points_on_axis(datapoints, "yaxis", mapping)
        self.assertEqual(datapoints.points, [1, 0, 2, None, 3, 1])
        self.assertEqual(mapping, {"lo": 0, "hi": 1})

    def test_new_labels_continue_after_explicit_positions(self) -> None:
        datapoints = Datapoints(
            points=["Apr", 5, "Feb", 2, "May", 1],
            pointsize=2,
            format=[ColumnFormat(x=True, number=False), ColumnFormat(y=True)],
        )
        mapping = build_category_mapping(resolve_category_source({"Feb": 1, "Mar": 3}))
        transform_points_on_axis(datapoints, "xaxis", mapping)
        self.assertEqual(mapping, {"Feb": 1, "Mar": 3, "Apr": 4, "May": 5})
        self.assertEqual(datapoints.points, [4, 5, 1, 2, 5, 1])

    def test_non_string_labels_are_keyed_by_text(self) -> None:
        datapoints = Datapoints(
            points=[7, 1, "7", 2],
            pointsize=2,
            format=[ColumnFormat(x=True, number=False), ColumnFormat(y=True)],
        )
        mapping: dict[str, float] = {}
        transform_points_on_axis(datapoints, "xaxis", mapping)
        self.assertEqual(mapping, {"7": 0})
        self.assertEqual(datapoints.points, [0, 1, 0, 2])

    def test_integral_floats_share_a_label_with_ints(self) -> None:
        datapoints = Datapoints(
            points=[1, 2, 1.0, 4, np.float64(2.0), 5, 2.5, 6],
            pointsize=2,
            format=[ColumnFormat(x=True, number=False), ColumnFormat(y=True)],
        )
        mapping: dict[str, float] = {}
        transform_points_on_axis(datapoints, "xaxis", mapping)
        self.assertEqual(mapping, {"1": 0, "2": 1, "2.5": 2})
        self.assertEqual(datapoints.points, [0, 2, 0, 4, 1, 5, 2, 6])


class TickGeneratorTests(unittest.TestCase):
    def _axis(self, category: dict[str, float], vmin: float, vmax: float) -> Axis:
        return Axis("xaxis", AxisOptions(mode="category"), category=category, min=vmin, max=vmax)

    def test_ticks_within_visible_range(self) -> None:
        axis = self._axis({"Feb": 0, "Mar": 1, "Apr": 2}, 0, 1)
        self.assertEqual(category_tick_generator(axis), [(0, "Feb"), (1, "Mar")])

    def test_ticks_sorted_by_position_with_ties_in_mapping_order(self) -> None:
        axis = self._axis({"a": 1, "b": 0, "c": 1}, -1, 5)
        self.assertEqual(category_tick_generator(axis), [(0, "b"), (1, "a"), (1, "c")])

    def test_generator_does_not_touch_mapping(self) -> None:
        mapping = {"Mar": 1, "Feb": 0}
        axis = self._axis(mapping, 0, 1)
        category_tick_generator(axis)
        self.assertEqual(list(mapping), ["Mar", "Feb"])

    def test_axis_without_mapping_has_no_ticks(self) -> None:
        axis = Axis("xaxis", AxisOptions(mode="category"), min=0, max=1)
        self.assertEqual(category_tick_generator(axis), [])


class CategoryPluginTests(unittest.TestCase):
    def test_plugin_registers_both_hooks(self) -> None:
        p = Plot([], plugins=[CATEGORIES_PLUGIN])
        self.assertEqual(len(p.hooks.stages(PROCESS_RAW_DATA)), 1)
        self.assertEqual(p.hooks.stages(PROCESS_DATAPOINTS), (process_datapoints,))

    def test_plugin_defaults_merge_with_user_options(self) -> None:
        p = Plot([], {"xaxis": {"mode": "category"}}, plugins=[CATEGORIES_PLUGIN])
        self.assertEqual(p.options.xaxis.mode, "category")
        self.assertIsNone(p.options.xaxis.category)

    def test_lazy_mapping_from_data_order(self) -> None:
        p = plot([[["b", 1], ["a", 2], ["b", 3], ["c", 4]]], {"xaxis": {"mode": "category"}})
        self.assertEqual(list(p.xaxis.category.items()), [("b", 0), ("a", 1), ("c", 2)])
        self.assertEqual(p.series[0].datapoints.points, [0, 1.0, 1, 2.0, 0, 3.0, 2, 4.0])

    def test_sequence_option_builds_mapping_before_data(self) -> None:
        p = plot([[]], {"xaxis": {"mode": "category", "category": ["Feb", "Mar", "Apr"]}})
        self.assertEqual(p.xaxis.category, {"Feb": 0, "Mar": 1, "Apr": 2})

    def test_explicit_option_with_gap_fill(self) -> None:
        p = plot([[["Apr", 5], ["Feb", 2]]], {"xaxis": {"mode": "category", "category": {"Feb": 1, "Mar": 3}}})
        self.assertEqual(p.xaxis.category, {"Feb": 1, "Mar": 3, "Apr": 4})

    def test_null_category_records_stay_null(self) -> None:
        p = plot([[["a", 1], None, [None, 3], ["b", 2]]], {"xaxis": {"mode": "category"}})
        self.assertEqual(p.series[0].datapoints.points, [0, 1.0, None, None, None, None, 1, 2.0])
        self.assertEqual(p.xaxis.category, {"a": 0, "b": 1})

    def test_leaving_category_mode_restores_numeric_ticks(self) -> None:
        p = plot([[[1, 2], [3, 4]]], {"xaxis": {"mode": "category"}})
        self.assertEqual(p.xaxis.ticks, [(0, "1"), (1, "3")])
        p.xaxis.set_mode(None)
        p.setup_data()
        self.assertIsNone(p.xaxis.category)
        self.assertEqual((p.xaxis.min, p.xaxis.max), (1.0, 3.0))
        self.assertEqual(p.xaxis.ticks, [(1.0, "1"), (1.5, "1.5"), (2.0, "2"), (2.5, "2.5"), (3.0, "3")])

    def test_second_pass_keeps_assigned_positions(self) -> None:
        p = plot([[["b", 1], ["a", 2]]], {"xaxis": {"mode": "category"}})
        first = p.xaxis.category
        p.set_data([[["c", 1], ["a", 2]]]).setup_data()
        self.assertIs(p.xaxis.category, first)
        self.assertEqual(p.xaxis.category, {"b": 0, "a": 1, "c": 2})
        self.assertEqual(p.series[0].datapoints.points, [2, 1.0, 1, 2.0])

    def test_repeated_fresh_passes_are_deterministic(self) -> None:
        data = [[["x", 1], ["z", 2], ["y", 3], ["x", 4]]]
        options = {"xaxis": {"mode": "category", "category": {"y": 5}}}
        a = plot(data, options)
        b = plot(data, options)
        self.assertEqual(list(a.xaxis.category.items()), list(b.xaxis.category.items()))
        self.assertEqual(a.series[0].datapoints.points, b.series[0].datapoints.points)

        a.xaxis.reset_category()
        a.setup_data()
        self.assertEqual(list(a.xaxis.category.items()), list(b.xaxis.category.items()))
        self.assertEqual(a.series[0].datapoints.points, b.series[0].datapoints.points)

    def test_toggling_mode_rebuilds_mapping_from_options(self) -> None:
        p = plot([[["b", 1], ["a", 2]]], {"xaxis": {"mode": "category", "category": ["a", "b"]}})
        p.xaxis.category["extra"] = 9
        p.xaxis.set_mode(None)
        self.assertIsNone(p.xaxis.category)
        p.xaxis.set_mode("category")
        p.setup_data()
        self.assertEqual(p.xaxis.category, {"a": 0, "b": 1})

    def test_category_ticks_installed_and_resolved(self) -> None:
        p = plot([[["Feb", 34], ["Mar", 20], ["Apr", 10]]], {"xaxis": {"mode": "category"}})
        self.assertIs(p.xaxis.options.ticks, category_tick_generator)
        self.assertEqual((p.xaxis.min, p.xaxis.max), (0.0, 2.0))
        self.assertEqual(p.xaxis.ticks, [(0, "Feb"), (1, "Mar"), (2, "Apr")])
        self.assertEqual(p.xaxis.label_for(1), "Mar")

    def test_custom_ticks_are_not_replaced(self) -> None:
        p = plot([[["Feb", 34], ["Mar", 20]]], {"xaxis": {"mode": "category", "ticks": [[0, "zero"]]}})
        self.assertEqual(p.xaxis.options.ticks, [[0, "zero"]])
        self.assertEqual(p.xaxis.ticks, [(0, "zero")])
        self.assertEqual(p.xaxis.category, {"Feb": 0, "Mar": 1})

    def test_user_axis_options_are_not_mutated(self) -> None:
        options = AxisOptions(mode="category")
        plot([[["Feb", 1]]], {"xaxis": options})
        self.assertIsNone(options.ticks)

    def test_y_category_range_comes_from_mapping(self) -> None:
        p = plot([[[1, "low"], [2, "high"], [3, "low"]]], {"yaxis": {"mode": "category"}})
        self.assertEqual(p.yaxis.category, {"low": 0, "high": 1})
        self.assertEqual((p.yaxis.min, p.yaxis.max), (0.0, 1.0))
        self.assertEqual(p.yaxis.ticks, [(0, "low"), (1, "high")])
        self.assertIsNone(p.xaxis.category)

    def test_bars_widen_category_range(self) -> None:
        p = plot(
            [{"data": [["Feb", 34], ["Mar", 20], ["Apr", 10]], "bars": {"show": True}}],
            {"xaxis": {"mode": "category"}},
        )
        self.assertAlmostEqual(p.xaxis.min, -0.4)
        self.assertAlmostEqual(p.xaxis.max, 2.4)
        self.assertEqual([label for _, label in p.xaxis.ticks], ["Feb", "Mar", "Apr"])
        self.assertEqual(p.series[0].datapoints.points[:3], [0, 34.0, 0])

    def test_numeric_axes_are_untouched(self) -> None:
        p = plot([[[1, 2], [3, 4]]])
        self.assertIsNone(p.xaxis.category)
        self.assertEqual(p.series[0].datapoints.points, [1.0, 2.0, 3.0, 4.0])

    def test_series_share_one_mapping_per_axis(self) -> None:
        p = plot([[["a", 1], ["b", 2]], [["c", 3], ["a", 4]]], {"xaxis": {"mode": "category"}})
        self.assertEqual(p.xaxis.category, {"a": 0, "b": 1, "c": 2})
        self.assertEqual(p.series[1].datapoints.points, [2, 3.0, 0, 4.0])


if __name__ == "__main__":
    unittest.main()
