import structlog
import logging
import sys


def setup_logging(level: str = "INFO"):
    """Configure structlog for JSON output on stderr

    stdout is reserved for protocol messages in stdio mode, so every log line
    goes to stderr regardless of transport.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )

    return structlog.get_logger("quickchart_mcp")


logger = setup_logging()


def log_tool_call(tool: str, status: str, start_ms: int, end_ms: int,
                  chart_type: str = None, error: str = None):
    """Log structured tool call event, tool_failed when an error is given"""
    if error is None:
        event, level = "tool_called", logger.info
    else:
        event, level = "tool_failed", logger.warning
    level(
        event,
        tool=tool,
        chart_type=chart_type,
        start_ms=start_ms,
        end_ms=end_ms,
        duration_ms=end_ms - start_ms,
        status=status,
        error=error
    )
