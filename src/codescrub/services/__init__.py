"""
Service Layer - ConversionService and its result model.
"""

from codescrub.services.conversion_models import ConversionOutcome
from codescrub.services.conversion_service import ConversionService, convert

__all__ = [
    "ConversionOutcome",
    "ConversionService",
    "convert",
]
