"""Utility functions and decorators."""

import logging.config
import structlog
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type, Union
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential


def retry_with_backoff(
    max_retries: int = 3,
    backoff_factor: float = 1.5,
    max_wait: float = 60.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)
):
    """Decorator for retry with exponential backoff."""
    return retry(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=backoff_factor, max=max_wait),
        retry=retry_if_exception_type(retry_on),
        reraise=True
    )


LOG_LINE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _log_processors(use_json: bool) -> List[Any]:
    renderer = structlog.processors.JSONRenderer() if use_json else structlog.dev.ConsoleRenderer()
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def setup_logging(
    config_path: Optional[Union[str, Path]] = None,
    log_level: str = "INFO",
    log_format: str = "text"
) -> None:
    """Route structlog through stdlib logging.

    A YAML ``dictConfig`` file takes precedence over ``log_level`` and
    switches rendering to JSON, as does ``log_format="json"``.
    """
    from_file = bool(config_path) and Path(config_path).exists()
    if from_file:
        with open(config_path, 'r') as f:
            logging.config.dictConfig(yaml.safe_load(f))
    else:
        logging.basicConfig(level=getattr(logging, log_level.upper()), format=LOG_LINE_FORMAT)

    structlog.configure(
        processors=_log_processors(use_json=from_file or log_format == "json"),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def safe_get(dictionary: Dict[str, Any], key: str, default: Any = None) -> Any:
    """Safely get a value from a nested dictionary using dot notation."""
    keys = key.split('.')
    value = dictionary

    try:
        for k in keys:
            value = value[k]
        return value
    except (KeyError, TypeError):
        return default


def format_currency(amount: float, currency: str = "USD") -> str:
    """Format a monthly amount for display."""
    symbol = "$" if currency == "USD" else f"{currency} "
    return f"{symbol}{amount:,.2f}"
