import json
import unittest

from ielts_maestro.extraction import CHART_PALETTE, extract_chart_payload, get_fallback_chart

from support import GRAPH_DATA, chart_response


def _assert_usable(test: unittest.TestCase, chart) -> None:
    test.assertIn(chart.type, ("line", "bar", "pie", "doughnut"))
    test.assertTrue(chart.datasets)
    test.assertIsInstance(chart.x_axis.values, list)
    for dataset in chart.datasets:
        test.assertTrue(dataset.color)


class ChartExtractionTests(unittest.TestCase):
    def test_prose_then_object(self) -> None:
        raw = (
            'Here is your chart.\n{"graphData": {"type":"bar","title":"T","xAxis":{"label":"X","values":["a","b"]},'
            '"yAxis":{"label":"Y"},"datasets":[{"label":"S1","data":[1,2]}]}}'
        )
        result = extract_chart_payload(raw)
        self.assertFalse(result.used_fallback)
        self.assertEqual(result.assignment_text, "Here is your chart.")
        self.assertEqual(result.chart.type, "bar")
        self.assertEqual(result.chart.datasets[0].color, CHART_PALETTE[0])
        self.assertIsNone(result.chart.y_axis.min)

    def test_broken_json_falls_back(self) -> None:
        raw = "Some prose with broken { json"
        result = extract_chart_payload(raw)
        self.assertTrue(result.used_fallback)
        self.assertEqual(result.assignment_text, raw)
        self.assertEqual(result.chart, get_fallback_chart())

    def test_every_malformed_input_still_yields_a_chart(self) -> None:
        inputs = [
            "",
            "No JSON here at all.",
            '{"graphData": {"type": "line", "datasets": [',
            '{"somethingElse": {"a": 1}}',
            "Prompt text {'graphData': {'type': 'line'}}",
            '{"graphData": "not an object"}',
            '{"graphData": {"type": "line", "xAxis": {"values": ["a"]}, "datasets": []}}',
            '{"graphData": {"type": "line", "xAxis": {"values": "a,b"}, "datasets": [{"data": [1]}]}}',
            '[1, 2, 3]',
            # Integer too long for int() conversion
            'Intro {"graphData": {"xAxis": {"values": ["a"]}, "datasets": [{"data": [' + "9" * 5000 + ']}]}}',
            # Nested deeper than the parser can recurse
            '{"graphData": ' + "[" * 100000 + "]" * 100000 + "}",
            '{"graphData": {"xAxis": {"values": ["a"]}, "datasets": [{"data": [Infinity]}]}}',
            '{"graphData": {"xAxis": {"values": ["a"]}, "yAxis": {"max": NaN}, "datasets": [{"data": [1]}]}}',
        ]
        for raw in inputs:
            with self.subTest(raw=raw):
                result = extract_chart_payload(raw)
                self.assertTrue(result.used_fallback)
                _assert_usable(self, result.chart)

    def test_well_formed_chart_passes_through(self) -> None:
        result = extract_chart_payload(chart_response())
        self.assertFalse(result.used_fallback)
        self.assertEqual(result.assignment_text, "The chart below shows household spending.")
        payload = result.chart.to_payload()
        self.assertEqual(payload["title"], GRAPH_DATA["title"])
        self.assertEqual(payload["xAxis"], GRAPH_DATA["xAxis"])
        self.assertEqual(payload["yAxis"], GRAPH_DATA["yAxis"])
        self.assertEqual(payload["datasets"][0], GRAPH_DATA["datasets"][0])
        self.assertEqual(payload["datasets"][1]["data"], [20, 28, 35])
        # Only the missing color was filled, by position
        self.assertEqual(payload["datasets"][1]["color"], CHART_PALETTE[1])

    def test_defaults_fill_missing_fields(self) -> None:
        raw = json.dumps({"graphData": {"xAxis": {"values": [2019, 2020]}, "datasets": [{"data": [3, 4]}]}})
        result = extract_chart_payload(raw)
        self.assertFalse(result.used_fallback)
        chart = result.chart
        self.assertEqual(chart.type, "line")
        self.assertEqual(chart.title, "Data Visualization")
        self.assertEqual(chart.x_axis.label, "X Axis")
        self.assertEqual(chart.x_axis.values, ["2019", "2020"])
        self.assertEqual(chart.y_axis.label, "Y Axis")
        self.assertEqual(chart.datasets[0].label, "Series 1")
        self.assertEqual(result.assignment_text, "")

    def test_palette_cycles_by_dataset_index(self) -> None:
        datasets = [{"label": f"S{i}", "data": [i]} for i in range(8)]
        raw = "Intro\n" + json.dumps(
            {"graphData": {"type": "bar", "xAxis": {"values": ["x"]}, "datasets": datasets}}
        )
        colors = [d.color for d in extract_chart_payload(raw).chart.datasets]
        self.assertEqual(colors[:6], CHART_PALETTE)
        self.assertEqual(colors[6], CHART_PALETTE[0])
        self.assertEqual(colors[7], CHART_PALETTE[1])

    def test_trailing_commentary_is_recovered_by_regex(self) -> None:
        raw = chart_response(prefix="Describe the chart.") + "\n\nLet me know if you need another chart!"
        result = extract_chart_payload(raw)
        self.assertFalse(result.used_fallback)
        self.assertEqual(result.assignment_text, "Describe the chart.")
        self.assertEqual(result.chart.title, "Household spending")

    def test_code_fence_is_stripped_from_assignment(self) -> None:
        raw = "Summarise the information.\n```json\n" + json.dumps({"graphData": GRAPH_DATA}) + "\n```"
        result = extract_chart_payload(raw)
        self.assertFalse(result.used_fallback)
        self.assertEqual(result.assignment_text, "Summarise the information.")

    def test_nested_closing_braces_defeat_regex_recovery(self) -> None:
        # yAxis last: the non-greedy match stops at its "}}" and cannot parse
        graph = {"type": "line", "xAxis": {"values": ["a"]}, "datasets": [{"data": [1]}], "yAxis": {"label": "Y"}}
        raw = "Intro\n" + json.dumps({"graphData": graph}) + "\nThanks!"
        result = extract_chart_payload(raw)
        self.assertTrue(result.used_fallback)
        self.assertEqual(result.assignment_text, raw)

    def test_unknown_chart_type_falls_back_but_keeps_text(self) -> None:
        graph = dict(GRAPH_DATA, type="scatter")
        result = extract_chart_payload(chart_response(prefix="Prompt.", graph_data=graph))
        self.assertTrue(result.used_fallback)
        self.assertEqual(result.assignment_text, "Prompt.")
        self.assertEqual(result.chart.title, get_fallback_chart().title)

    def test_chart_type_is_case_insensitive(self) -> None:
        graph = dict(GRAPH_DATA, type="Pie")
        result = extract_chart_payload(chart_response(graph_data=graph))
        self.assertFalse(result.used_fallback)
        self.assertEqual(result.chart.type, "pie")

    def test_mismatched_dataset_length_is_not_enforced(self) -> None:
        graph = dict(GRAPH_DATA, datasets=[{"label": "Short", "data": [1]}])
        with self.assertLogs("ielts_maestro.extraction.charts", level="WARNING") as logs:
            result = extract_chart_payload(chart_response(graph_data=graph))
        self.assertFalse(result.used_fallback)
        self.assertEqual(result.chart.datasets[0].data, [1])
        self.assertTrue(any("xAxis values" in line for line in logs.output))

    def test_unknown_keys_are_passed_through(self) -> None:
        graph = dict(
            GRAPH_DATA,
            yAxis={"label": "Percent", "min": 0, "max": 50, "stepSize": 10},
            datasets=[{"label": "Food", "color": "#123456", "data": [30, 25, 20], "borderWidth": 2}],
            legend={"position": "bottom"},
        )
        result = extract_chart_payload(chart_response(graph_data=graph))
        self.assertFalse(result.used_fallback)
        payload = result.chart.to_payload()
        self.assertEqual(payload["yAxis"]["stepSize"], 10)
        self.assertEqual(payload["datasets"][0]["borderWidth"], 2)
        self.assertEqual(payload["legend"], {"position": "bottom"})
        self.assertIsInstance(payload["datasets"][0]["data"][0], int)
        self.assertEqual(json.loads(json.dumps(payload)), payload)


if __name__ == "__main__":
    unittest.main()
