"""Tests for renderer URL encoding."""

import json
from urllib.parse import parse_qsl, unquote, urlsplit

import pytest

from quickchart_mcp.config import Config
from quickchart_mcp.core.builder import build
from quickchart_mcp.core.encoder import encode, encode_component, query_value
from quickchart_mcp.core.errors import InvalidParams
from quickchart_mcp.core.models import GraphRequest, WordCloudRequest
from quickchart_mcp.core.validator import validate


def url_for(args, settings):
    return encode(build(validate(args)), settings)


class TestHelpers:
    def test_encode_component_matches_uri_component_rules(self):
        assert encode_component("a b/c?d=e&f") == "a%20b%2Fc%3Fd%3De%26f"
        assert encode_component("-_.!~*'()") == "-_.!~*'()"

    @pytest.mark.parametrize("value,expected", [
        (True, "true"),
        (False, "false"),
        (5, "5"),
        (600.0, "600"),
        (1.5, "1.5"),
        (["red", "#00ff00"], '["red","#00ff00"]'),
        ("sqrt", "sqrt"),
    ])
    def test_query_value(self, value, expected):
        assert query_value(value) == expected


class TestChartUrl:
    def test_chart_endpoint_and_parameter(self, bar_args, settings):
        url = url_for(bar_args, settings)
        assert url.startswith("https://quickchart.io/chart?c=")

    def test_config_decodes_back_to_identical_structure(self, bar_args, settings):
        config = build(validate(bar_args))
        url = encode(config, settings)
        payload = unquote(url.split("?c=", 1)[1])
        assert json.loads(payload) == config.model_dump()

    def test_json_is_compact(self, bar_args, settings):
        payload = unquote(url_for(bar_args, settings).split("?c=", 1)[1])
        assert ", " not in payload
        assert ": " not in payload

    def test_deterministic(self, settings):
        args = {
            "type": "radar",
            "labels": ["a", "b", "c"],
            "datasets": [{"label": "x", "data": [1, 2, 3], "additionalConfig": {"fill": True}}],
            "title": "Radar",
            "options": {"scale": {"ticks": {"min": 0}}},
        }
        assert url_for(args, settings) == url_for(dict(args), settings)

    def test_base_url_override(self, bar_args):
        settings = Config(chart_url="http://localhost:3400/chart")
        assert url_for(bar_args, settings).startswith("http://localhost:3400/chart?c=")

    def test_non_ascii_labels(self, settings):
        config = build(validate({"type": "pie", "labels": ["café"], "datasets": [{"data": [1]}]}))
        payload = unquote(encode(config, settings).split("?c=", 1)[1])
        assert json.loads(payload)["data"]["labels"] == ["café"]


class TestGraphUrl:
    def test_defaults_applied(self, settings):
        url = url_for({"type": "graphviz", "dot": "digraph G { A -> B; }"}, settings)
        assert url == (
            "https://quickchart.io/graphviz"
            "?graph=digraph%20G%20%7B%20A%20-%3E%20B%3B%20%7D&layout=dot&format=png"
        )

    def test_layout_and_format(self, settings):
        url = url_for({
            "type": "graphviz",
            "dot": "graph { a -- b }",
            "graphvizLayout": "circo",
            "graphvizFormat": "svg",
        }, settings)
        assert url.endswith("&layout=circo&format=svg")

    def test_empty_dot_rejected_at_encode_time(self, settings):
        with pytest.raises(InvalidParams, match="DOT language code is required"):
            encode(GraphRequest(dot=""), settings)


class TestWordcloudUrl:
    def test_only_set_parameters_appear(self, settings):
        url = url_for({"type": "wordcloud", "text": "a b c", "maxNumWords": 5}, settings)
        assert url == "https://quickchart.io/wordcloud?text=a+b+c&maxNumWords=5"

    def test_fixed_parameter_order(self, settings):
        url = url_for({
            "type": "wordcloud",
            "text": "hello",
            "useWordList": True,
            "colors": ["red", "blue"],
            "wordcloudFormat": "png",
            "width": 800,
            "removeStopwords": False,
        }, settings)
        names = [name for name, _ in parse_qsl(urlsplit(url).query)]
        assert names == ["text", "format", "width", "colors", "removeStopwords", "useWordList"]

    def test_values_stringified(self, settings):
        url = url_for({
            "type": "wordcloud",
            "text": "hello",
            "colors": ["red", "#00ff00"],
            "cleanWords": False,
            "rotation": 0,
        }, settings)
        params = dict(parse_qsl(urlsplit(url).query))
        assert params["colors"] == '["red","#00ff00"]'
        assert params["cleanWords"] == "false"
        assert params["rotation"] == "0"

    def test_empty_text_rejected_at_encode_time(self, settings):
        with pytest.raises(InvalidParams, match="Text is required"):
            encode(WordCloudRequest(text=""), settings)

    def test_wordcloud_endpoint_override(self):
        settings = Config(wordcloud_url="http://renderer/wc")
        url = url_for({"type": "wordcloud", "text": "x"}, settings)
        assert url == "http://renderer/wc?text=x"
