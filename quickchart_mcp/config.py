import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_CHART_URL = "https://quickchart.io/chart"
DEFAULT_GRAPHVIZ_URL = "https://quickchart.io/graphviz"
DEFAULT_WORDCLOUD_URL = "https://quickchart.io/wordcloud"


@dataclass(frozen=True)
class Config:
    """Configuration management using environment variables"""

    # Rendering endpoints
    chart_url: str = DEFAULT_CHART_URL
    graphviz_url: str = DEFAULT_GRAPHVIZ_URL
    wordcloud_url: str = DEFAULT_WORDCLOUD_URL

    # Server settings (port <= 0 means stdio mode)
    host: str = "0.0.0.0"
    port: int = 0

    # Remote fetch
    timeout_seconds: float = 30.0

    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Read settings once from the environment"""
        env = os.environ if environ is None else environ

        try:
            port = int(env.get("PORT", "0") or "0")
        except ValueError:
            raise ValueError(f"PORT must be an integer, got {env.get('PORT')!r}")

        try:
            timeout = float(env.get("QUICKCHART_TIMEOUT_SECONDS", "30"))
        except ValueError:
            raise ValueError(
                f"QUICKCHART_TIMEOUT_SECONDS must be a number, got {env.get('QUICKCHART_TIMEOUT_SECONDS')!r}"
            )

        return cls(
            chart_url=env.get("QUICKCHART_BASE_URL", DEFAULT_CHART_URL),
            graphviz_url=env.get("QUICKCHART_GRAPHVIZ_URL", DEFAULT_GRAPHVIZ_URL),
            wordcloud_url=env.get("QUICKCHART_WORDCLOUD_URL", DEFAULT_WORDCLOUD_URL),
            host=env.get("HOST", "0.0.0.0"),
            port=port,
            timeout_seconds=timeout,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def http_mode(self) -> bool:
        return self.port > 0
