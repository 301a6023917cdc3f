from __future__ import annotations

from dynamo_autoscale.commons.logging import LoggerHandle, get_logger


def logger_handle() -> LoggerHandle:
    # Resolves to the process-wide logger; override in tests via
    # `app.dependency_overrides[logger_handle]`.
    return get_logger()
