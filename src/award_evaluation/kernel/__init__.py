"""
Kernel - shared infrastructure for the award workflows

Errors, id generation, settings, logging, metrics and storage retries.
Nothing here knows what an award is beyond the error vocabulary.
"""

from award_evaluation.kernel.errors import (
    AwardNotFound,
    AwardValidationError,
    DataIntegrityError,
    EvaluationError,
)
from award_evaluation.kernel.ids import IdGenerator, TimeBasedIdGenerator, generate_id
from award_evaluation.kernel.settings import ServiceSettings

__all__ = [
    # IDs
    "IdGenerator",
    "TimeBasedIdGenerator",
    "generate_id",
    # Settings
    "ServiceSettings",
    # Errors
    "EvaluationError",
    "AwardValidationError",
    "AwardNotFound",
    "DataIntegrityError",
]
