"""
Enrichment error taxonomy

All of these are recovered inside the pipeline; none of them escape
EnrichmentService.enrich_rows().
"""
from typing import Optional


class EnrichmentError(Exception):
    """Base class for enrichment pipeline errors"""


class RemoteUnavailableError(EnrichmentError):
    """Inference endpoint returned non-2xx, timed out, or could not be reached"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RowProcessingError(EnrichmentError):
    """Unexpected failure while normalizing or assembling a row"""

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.index = index


class AvailabilityParseError(EnrichmentError, ValueError):
    """Availability value is not an integer"""
