"""Input validation - turns raw tool arguments into typed requests

Every check fails fast with InvalidParams; nothing past this module sees the
caller's open mapping.
"""
from typing import Any, Dict, Literal, Optional, Sequence, get_args, get_origin

from pydantic import ValidationError

from quickchart_mcp.core.errors import InvalidParams
from quickchart_mcp.core.models import (
    CHART_TYPES,
    GRAPHVIZ_FORMATS,
    GRAPHVIZ_LAYOUTS,
    WORDCLOUD_PARAMS,
    ChartRequest,
    Dataset,
    GraphRequest,
    ToolRequest,
    WordCloudRequest,
)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _check_choice(name: str, value: Any, choices: Sequence[str]):
    if value not in choices:
        raise InvalidParams(f"Invalid {name}. Must be one of: {', '.join(choices)}")


def validate_chart_type(chart_type: Any):
    """Reject any type outside the supported set"""
    if chart_type not in CHART_TYPES:
        raise InvalidParams(f"Invalid chart type. Must be one of: {', '.join(CHART_TYPES)}")


def validate(raw_args: Optional[Dict[str, Any]]) -> ToolRequest:
    """Validate raw tool arguments and return the typed request for their type"""
    if raw_args is None:
        raise InvalidParams("No arguments provided to generate a chart")
    if not isinstance(raw_args, dict):
        raise InvalidParams("Arguments must be an object")

    chart_type = raw_args.get("type")
    if not chart_type:
        raise InvalidParams("Chart type is required")
    validate_chart_type(chart_type)

    if chart_type == "graphviz":
        return _validate_graph(raw_args)
    if chart_type == "wordcloud":
        return _validate_wordcloud(raw_args)
    return _validate_chart(chart_type, raw_args)


def _validate_chart(chart_type: str, raw_args: Dict[str, Any]) -> ChartRequest:
    datasets = raw_args.get("datasets")
    if datasets is None or not _is_sequence(datasets):
        raise InvalidParams("Datasets must be a non-empty array")

    labels = raw_args.get("labels")
    if labels is not None and not _is_sequence(labels):
        raise InvalidParams("Labels must be an array")

    title = raw_args.get("title")
    if title is not None and not isinstance(title, str):
        raise InvalidParams("Title must be a string")

    options = raw_args.get("options")
    if options is not None and not isinstance(options, dict):
        raise InvalidParams("Options must be an object")

    return ChartRequest(
        type=chart_type,
        labels=list(labels or []),
        datasets=[_validate_dataset(dataset) for dataset in datasets],
        title=title,
        options=dict(options or {}),
    )


def _validate_dataset(dataset: Any) -> Dataset:
    if not isinstance(dataset, dict) or dataset.get("data") is None:
        raise InvalidParams("Each dataset must have a data property")

    data = dataset["data"]
    if not _is_sequence(data):
        raise InvalidParams("Dataset data must be an array")

    for color_field in ("backgroundColor", "borderColor"):
        color = dataset.get(color_field)
        if color is None or isinstance(color, str):
            continue
        if not (_is_sequence(color) and all(isinstance(c, str) for c in color)):
            raise InvalidParams(f"Dataset {color_field} must be a string or an array of strings")

    additional = dataset.get("additionalConfig")
    if additional is not None and not isinstance(additional, dict):
        raise InvalidParams("Dataset additionalConfig must be an object")

    return Dataset(
        label=dataset.get("label"),
        data=list(data),
        backgroundColor=dataset.get("backgroundColor"),
        borderColor=dataset.get("borderColor"),
        additionalConfig=additional,
    )


def _validate_graph(raw_args: Dict[str, Any]) -> GraphRequest:
    dot = raw_args.get("dot")
    if not dot or not isinstance(dot, str):
        raise InvalidParams("DOT language code is required for graphviz charts")

    graph_format = raw_args.get("graphvizFormat") or "png"
    _check_choice("graphvizFormat", graph_format, GRAPHVIZ_FORMATS)

    layout = raw_args.get("graphvizLayout") or "dot"
    _check_choice("graphvizLayout", layout, GRAPHVIZ_LAYOUTS)

    return GraphRequest(dot=dot, format=graph_format, layout=layout)


# pydantic error type -> what the caller should have sent
EXPECTED_KINDS = {
    "string_type": "a string",
    "int_type": "a number",
    "float_type": "a number",
    "bool_type": "a boolean",
    "list_type": "an array of strings",
}

WORDCLOUD_ARGS = dict(WORDCLOUD_PARAMS)


def _validate_wordcloud(raw_args: Dict[str, Any]) -> WordCloudRequest:
    text = raw_args.get("text")
    if not text or not isinstance(text, str):
        raise InvalidParams("Text is required for wordcloud charts")

    fields = {"text": text}
    for param, arg in WORDCLOUD_PARAMS:
        value = raw_args.get(arg)
        if value is not None:
            fields[param] = value

    try:
        return WordCloudRequest(**fields)
    except ValidationError as e:
        raise InvalidParams(_wordcloud_error_message(e.errors()[0]))


def _field_choices(param: str) -> Sequence[str]:
    for candidate in get_args(WordCloudRequest.model_fields[param].annotation):
        if get_origin(candidate) is Literal:
            return get_args(candidate)
    return ()


def _wordcloud_error_message(error: Dict[str, Any]) -> str:
    """Name the caller's argument, not the model field, in the message"""
    param = error["loc"][0]
    arg = WORDCLOUD_ARGS.get(param, param)

    if error["type"] == "literal_error":
        return f"Invalid {arg}. Must be one of: {', '.join(_field_choices(param))}"
    if any(isinstance(part, int) for part in error["loc"][1:]):
        return f"{arg} must be an array of strings"
    expected = EXPECTED_KINDS.get(error["type"])
    if expected is None:
        return f"{arg}: {error['msg']}"
    return f"{arg} must be {expected}"
