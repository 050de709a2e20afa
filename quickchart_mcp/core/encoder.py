"""Request encoder - builds the final renderer URL for a built request"""
import json
from typing import Any, List, Tuple
from urllib.parse import quote, urlencode

from quickchart_mcp.config import Config
from quickchart_mcp.core.errors import InvalidParams
from quickchart_mcp.core.models import (
    WORDCLOUD_PARAMS,
    BuiltRequest,
    ChartConfig,
    GraphRequest,
    WordCloudRequest,
)

# characters encodeURIComponent leaves alone
URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_component(value: str) -> str:
    return quote(value, safe=URI_COMPONENT_SAFE)


def compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def query_value(value: Any) -> str:
    """Stringify a parameter the way the renderer reads it"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return compact_json(list(value))
    return str(value)


def encode_chart(config: ChartConfig, settings: Config) -> str:
    payload = compact_json(config.model_dump())
    return f"{settings.chart_url}?c={encode_component(payload)}"


def encode_graph(request: GraphRequest, settings: Config) -> str:
    if not request.dot or not isinstance(request.dot, str):
        raise InvalidParams("DOT language code is required for graphviz charts")
    layout = request.layout or "dot"
    graph_format = request.format or "png"
    return (
        f"{settings.graphviz_url}?graph={encode_component(request.dot)}"
        f"&layout={layout}&format={graph_format}"
    )


def wordcloud_params(request: WordCloudRequest) -> List[Tuple[str, str]]:
    """text first, then every optional parameter the caller set, in fixed order"""
    params = [("text", request.text)]
    for name, _ in WORDCLOUD_PARAMS:
        value = getattr(request, name)
        if value is not None:
            params.append((name, query_value(value)))
    return params


def encode_wordcloud(request: WordCloudRequest, settings: Config) -> str:
    if not request.text or not isinstance(request.text, str):
        raise InvalidParams("Text is required for wordcloud charts")
    return f"{settings.wordcloud_url}?{urlencode(wordcloud_params(request))}"


def encode(built: BuiltRequest, settings: Config) -> str:
    """Encode a built request into the URL of its rendering endpoint"""
    if isinstance(built, GraphRequest):
        return encode_graph(built, settings)
    if isinstance(built, WordCloudRequest):
        return encode_wordcloud(built, settings)
    return encode_chart(built, settings)
