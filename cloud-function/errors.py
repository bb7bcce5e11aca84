"""
Error types shared across the pricing pipeline.
"""

from typing import Optional


class PricingError(Exception):
    """Base class for pipeline errors"""


class NoApiKeyError(PricingError):
    """No exchange rates API key was supplied or configured"""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message or "No API key available. Please add your Open Exchange Rates API key in Settings."
        )


class SourceUnavailableError(PricingError):
    """A reference data provider could not be reached or returned unusable data"""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source} unavailable: {message}")
        self.source = source


class PartialApplyFailure(PricingError):
    """A single territory update failed during a bulk apply"""

    def __init__(self, item_id: str, region_code: str, cause: Exception):
        super().__init__(f"{region_code}: {cause}")
        self.item_id = item_id
        self.region_code = region_code
        self.cause = cause


class ProtocolError(PricingError):
    """The progress event stream was malformed or closed early"""


class StreamOperationError(PricingError):
    """The remote operation reported a failure (error event or non-2xx response)"""

    def __init__(self, message: str, completed: Optional[int] = None, total: Optional[int] = None):
        super().__init__(message)
        self.completed = completed
        self.total = total


class StreamAborted(PricingError):
    """The consumer aborted the stream"""
