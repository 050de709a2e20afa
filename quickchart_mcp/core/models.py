from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr
from typing import Any, Dict, List, Literal, Optional, Union, get_args

CHART_TYPES = (
    "bar", "line", "pie", "doughnut", "radar",
    "polarArea", "scatter", "bubble", "radialGauge", "speedometer", "graphviz", "wordcloud"
)

GRAPHVIZ_FORMATS = ("png", "svg", "jpg", "pdf")
GRAPHVIZ_LAYOUTS = ("dot", "neato", "fdp", "sfdp", "twopi", "circo")

WordCloudFormat = Literal["svg", "png"]
WordCloudScale = Literal["linear", "sqrt", "log"]
WordCloudCase = Literal["upper", "lower", "none"]

WORDCLOUD_FORMATS = get_args(WordCloudFormat)
WORDCLOUD_SCALES = get_args(WordCloudScale)
WORDCLOUD_CASES = get_args(WordCloudCase)

# (query parameter, caller argument) in the order they are appended to the URL
WORDCLOUD_PARAMS = (
    ("format", "wordcloudFormat"),
    ("width", "width"),
    ("height", "height"),
    ("backgroundColor", "backgroundColor"),
    ("fontFamily", "fontFamily"),
    ("fontWeight", "fontWeight"),
    ("loadGoogleFonts", "loadGoogleFonts"),
    ("fontScale", "fontScale"),
    ("scale", "scale"),
    ("padding", "padding"),
    ("rotation", "rotation"),
    ("maxNumWords", "maxNumWords"),
    ("minWordLength", "minWordLength"),
    ("case", "case"),
    ("colors", "colors"),
    ("removeStopwords", "removeStopwords"),
    ("cleanWords", "cleanWords"),
    ("language", "language"),
    ("useWordList", "useWordList"),
)

StrictNumber = Union[StrictInt, StrictFloat]
Color = Union[str, List[str]]


class Dataset(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: Optional[Any] = None
    data: List[Any]
    backgroundColor: Optional[Color] = None
    borderColor: Optional[Color] = None
    additionalConfig: Optional[Dict[str, Any]] = None


class ChartRequest(BaseModel):
    """Validated input for every chart-family type"""
    model_config = ConfigDict(frozen=True)

    type: str
    labels: List[Any] = Field(default_factory=list)
    datasets: List[Dataset]
    title: Optional[str] = None
    options: Dict[str, Any] = Field(default_factory=dict)


class GraphRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["graphviz"] = "graphviz"
    dot: str
    format: str = "png"
    layout: str = "dot"


class WordCloudRequest(BaseModel):
    """Word cloud text plus the rendering parameters the caller actually set

    Unset parameters stay None and are left out of the URL so the renderer
    applies its own defaults. Fields are strict: "5" is not a number and
    "yes" is not a boolean.
    """
    model_config = ConfigDict(frozen=True, strict=True)

    type: Literal["wordcloud"] = "wordcloud"
    text: StrictStr
    format: Optional[WordCloudFormat] = None
    width: Optional[StrictNumber] = None
    height: Optional[StrictNumber] = None
    backgroundColor: Optional[StrictStr] = None
    fontFamily: Optional[StrictStr] = None
    fontWeight: Optional[StrictStr] = None
    loadGoogleFonts: Optional[StrictStr] = None
    fontScale: Optional[StrictNumber] = None
    scale: Optional[WordCloudScale] = None
    padding: Optional[StrictNumber] = None
    rotation: Optional[StrictNumber] = None
    maxNumWords: Optional[StrictNumber] = None
    minWordLength: Optional[StrictNumber] = None
    case: Optional[WordCloudCase] = None
    colors: Optional[List[StrictStr]] = None
    removeStopwords: Optional[StrictBool] = None
    cleanWords: Optional[StrictBool] = None
    language: Optional[StrictStr] = None
    useWordList: Optional[StrictBool] = None


class ChartData(BaseModel):
    model_config = ConfigDict(frozen=True)

    labels: List[Any] = Field(default_factory=list)
    datasets: List[Dict[str, Any]]


class ChartConfig(BaseModel):
    """Chart.js configuration in the shape the chart endpoint expects"""
    model_config = ConfigDict(frozen=True)

    type: str
    data: ChartData
    options: Dict[str, Any] = Field(default_factory=dict)


ToolRequest = Union[ChartRequest, GraphRequest, WordCloudRequest]
BuiltRequest = Union[ChartConfig, GraphRequest, WordCloudRequest]
