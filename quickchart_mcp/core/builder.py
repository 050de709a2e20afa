"""Configuration builder - shapes validated requests into renderer input"""
from typing import Any, Dict, List

from quickchart_mcp.core.errors import InvalidParams
from quickchart_mcp.core.models import (
    BuiltRequest,
    ChartConfig,
    ChartData,
    ChartRequest,
    Dataset,
    GraphRequest,
    ToolRequest,
    WordCloudRequest,
)


class ChartShaper:
    """Type-specific step applied after the common chart configuration is built"""

    def shape(self, config: ChartConfig, request: ChartRequest) -> ChartConfig:
        return config


class GaugeShaper(ChartShaper):
    """radialGauge and speedometer need one scalar reading and show it as a label"""

    def shape(self, config: ChartConfig, request: ChartRequest) -> ChartConfig:
        first = request.datasets[0].data if request.datasets else []
        if not first or not first[0]:
            raise InvalidParams(f"{request.type} requires a single numeric value")

        options = dict(config.options)
        current = options.get("plugins")
        # non-mapping plugins are replaced outright
        plugins = dict(current) if isinstance(current, dict) else {}
        plugins["datalabels"] = {"display": True}
        options["plugins"] = plugins
        return config.model_copy(update={"options": options})


class PointShaper(ChartShaper):
    """scatter and bubble data must be [x, y] / [x, y, r] points"""

    def shape(self, config: ChartConfig, request: ChartRequest) -> ChartConfig:
        point = "[x, y, r]" if request.type == "bubble" else "[x, y]"
        for dataset in request.datasets:
            if not dataset.data or not isinstance(dataset.data[0], (list, tuple)):
                raise InvalidParams(f"{request.type} requires data points in {point} format")
        return config


SHAPERS: Dict[str, ChartShaper] = {
    "radialGauge": GaugeShaper(),
    "speedometer": GaugeShaper(),
    "scatter": PointShaper(),
    "bubble": PointShaper(),
}
DEFAULT_SHAPER = ChartShaper()


def normalize_dataset(dataset: Dataset) -> Dict[str, Any]:
    """Default label, pass styling through, then let additionalConfig win"""
    normalized: Dict[str, Any] = {
        "label": dataset.label or "",
        "data": list(dataset.data),
    }
    if dataset.backgroundColor is not None:
        normalized["backgroundColor"] = dataset.backgroundColor
    if dataset.borderColor is not None:
        normalized["borderColor"] = dataset.borderColor
    normalized.update(dataset.additionalConfig or {})
    return normalized


def build_options(request: ChartRequest) -> Dict[str, Any]:
    options = dict(request.options)
    if request.title:
        options["title"] = {"display": True, "text": request.title}
    return options


def build_chart_config(request: ChartRequest) -> ChartConfig:
    datasets: List[Dict[str, Any]] = [normalize_dataset(d) for d in request.datasets]
    config = ChartConfig(
        type=request.type,
        data=ChartData(labels=list(request.labels), datasets=datasets),
        options=build_options(request),
    )
    shaper = SHAPERS.get(request.type, DEFAULT_SHAPER)
    return shaper.shape(config, request)


def build(request: ToolRequest) -> BuiltRequest:
    """Dispatch on request kind

    Graph and word cloud requests have no dataset or axis concept, so they skip
    chart shaping and go to the encoder as they are.
    """
    if isinstance(request, (GraphRequest, WordCloudRequest)):
        return request
    return build_chart_config(request)
