from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


COMPONENT = "devlearnify-seed"


def add_component(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:  # noqa: ANN401
    # Seed output lands in the same log sink as the API server; tag it so it can be filtered.
    event_dict.setdefault("component", COMPONENT)
    return event_dict


def configure_logging(log_level: str) -> None:
    level = log_level.upper()
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    # botocore logs every request at DEBUG; only its warnings belong in seed output.
    logging.getLogger("botocore").setLevel(logging.WARNING)
    structlog.configure(
        processors=[
            add_component,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger()
