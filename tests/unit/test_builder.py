"""Tests for chart configuration building."""

import pytest

from quickchart_mcp.core.builder import build
from quickchart_mcp.core.errors import InvalidParams
from quickchart_mcp.core.models import ChartConfig, GraphRequest, WordCloudRequest
from quickchart_mcp.core.validator import validate


def build_args(args):
    return build(validate(args))


class TestChartConfig:
    def test_basic_shape(self, bar_args):
        config = build_args(bar_args)
        assert isinstance(config, ChartConfig)
        assert config.model_dump() == {
            "type": "bar",
            "data": {
                "labels": ["Q1", "Q2", "Q3"],
                "datasets": [{"label": "Revenue", "data": [10, 20, 30]}],
            },
            "options": {},
        }

    def test_defaults_for_labels_and_dataset_label(self):
        config = build_args({"type": "line", "datasets": [{"data": [1, 2]}]})
        assert config.data.labels == []
        assert config.data.datasets[0]["label"] == ""

    def test_colors_passed_through(self):
        config = build_args({
            "type": "bar",
            "datasets": [{"data": [1], "backgroundColor": "#FF6384", "borderColor": ["red"]}],
        })
        dataset = config.data.datasets[0]
        assert dataset["backgroundColor"] == "#FF6384"
        assert dataset["borderColor"] == ["red"]

    def test_unset_colors_are_absent(self):
        config = build_args({"type": "bar", "datasets": [{"data": [1]}]})
        assert "backgroundColor" not in config.data.datasets[0]
        assert "borderColor" not in config.data.datasets[0]

    def test_additional_config_overrides_defaults(self):
        config = build_args({
            "type": "line",
            "datasets": [{
                "label": "original",
                "data": [1, 2],
                "borderColor": "blue",
                "additionalConfig": {"label": "override", "borderColor": "green", "fill": False},
            }],
        })
        dataset = config.data.datasets[0]
        assert dataset["label"] == "override"
        assert dataset["borderColor"] == "green"
        assert dataset["fill"] is False
        assert "additionalConfig" not in dataset

    def test_title_merged_into_options(self):
        config = build_args({
            "type": "bar",
            "datasets": [{"data": [1]}],
            "title": "Sales",
            "options": {"scales": {"y": {"beginAtZero": True}}},
        })
        assert config.options == {
            "scales": {"y": {"beginAtZero": True}},
            "title": {"display": True, "text": "Sales"},
        }

    def test_title_wins_over_option_title(self):
        config = build_args({
            "type": "bar",
            "datasets": [{"data": [1]}],
            "title": "New",
            "options": {"title": {"display": False, "text": "Old"}},
        })
        assert config.options["title"] == {"display": True, "text": "New"}

    def test_empty_title_adds_nothing(self):
        config = build_args({"type": "bar", "datasets": [{"data": [1]}], "title": ""})
        assert "title" not in config.options


class TestGaugeTypes:
    @pytest.mark.parametrize("chart_type", ["radialGauge", "speedometer"])
    def test_valid_reading_enables_datalabels(self, chart_type):
        config = build_args({"type": chart_type, "datasets": [{"data": [72]}]})
        assert config.options["plugins"]["datalabels"] == {"display": True}

    @pytest.mark.parametrize("chart_type", ["radialGauge", "speedometer"])
    @pytest.mark.parametrize("data", [[0], [None], []])
    def test_falsy_or_missing_reading_rejected(self, chart_type, data):
        # 0 is rejected along with null and missing values
        with pytest.raises(InvalidParams, match=f"{chart_type} requires a single numeric value"):
            build_args({"type": chart_type, "datasets": [{"data": data}]})

    def test_empty_datasets_rejected(self):
        with pytest.raises(InvalidParams):
            build_args({"type": "radialGauge", "datasets": []})

    def test_caller_plugins_preserved(self):
        config = build_args({
            "type": "radialGauge",
            "datasets": [{"data": [50]}],
            "options": {"plugins": {"legend": {"display": False}}},
        })
        assert config.options["plugins"] == {
            "legend": {"display": False},
            "datalabels": {"display": True},
        }

    @pytest.mark.parametrize("plugins", [True, "on", 5, ["legend"]])
    def test_non_mapping_plugins_replaced(self, plugins):
        config = build_args({
            "type": "radialGauge",
            "datasets": [{"data": [50]}],
            "options": {"plugins": plugins},
        })
        assert config.options["plugins"] == {"datalabels": {"display": True}}


class TestPointTypes:
    def test_scatter_pairs_accepted(self):
        config = build_args({"type": "scatter", "datasets": [{"data": [[1, 2], [3, 4]]}]})
        assert config.data.datasets[0]["data"] == [[1, 2], [3, 4]]

    def test_bubble_triples_accepted(self):
        config = build_args({"type": "bubble", "datasets": [{"data": [[1, 2, 5]]}]})
        assert config.type == "bubble"

    def test_scatter_bare_number_rejected(self):
        with pytest.raises(InvalidParams, match=r"scatter requires data points in \[x, y\] format"):
            build_args({"type": "scatter", "datasets": [{"data": [1, 2, 3]}]})

    def test_bubble_message_names_radius(self):
        with pytest.raises(InvalidParams, match=r"\[x, y, r\]"):
            build_args({"type": "bubble", "datasets": [{"data": [5]}]})

    def test_every_dataset_checked(self):
        with pytest.raises(InvalidParams):
            build_args({
                "type": "scatter",
                "datasets": [{"data": [[1, 2]]}, {"data": [3]}],
            })


class TestPassThroughTypes:
    def test_graphviz_skips_chart_shaping(self):
        built = build_args({"type": "graphviz", "dot": "digraph { a -> b }"})
        assert isinstance(built, GraphRequest)
        assert built.type == "graphviz"

    def test_wordcloud_skips_chart_shaping(self):
        built = build_args({"type": "wordcloud", "text": "hello world"})
        assert isinstance(built, WordCloudRequest)
        assert built.type == "wordcloud"
