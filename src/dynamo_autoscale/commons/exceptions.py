"""
Common/base exceptions.

Service exceptions are mapped to HTTP responses in `api/exceptions.py`.
Core exceptions signal infrastructure failures and are never caught by the
API layer.
"""


class BaseServiceException(Exception):
    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class BaseServiceNotFoundException(BaseServiceException):
    pass


class BaseServiceUnProcessableException(BaseServiceException):
    pass


class BaseCoreException(Exception):
    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class LoggerSinkException(BaseCoreException):
    """The log sink cannot be written to. There is no fallback sink."""


class LoggerFrozenException(BaseCoreException):
    """The process-wide logger is already built and cannot be reconfigured."""
