"""
Award Module

Award aggregate, its commands and results, the business rules, the
status-details lifecycle, document reconciliation and award storage.
"""

from award_evaluation.award.commands import (
    AddRequirementResponseParams,
    AwardSpec,
    CreateAwardContext,
    CreateAwardData,
    CreateUnsuccessfulAwardsParams,
    DocumentSpec,
    EvaluateAwardContext,
    EvaluateAwardData,
    EvaluationSpec,
    OperationType,
    ReferenceVocabulary,
    SupplierSpec,
)
from award_evaluation.award.models import (
    Award,
    AwardStatus,
    AwardStatusDetails,
    Document,
    DocumentType,
    RequirementResponse,
    Supplier,
    Value,
)
from award_evaluation.award.repository import (
    AwardPeriodRepository,
    AwardRecord,
    AwardRepository,
    SQLiteAwardPeriodRepository,
    SQLiteAwardRepository,
)
from award_evaluation.award.responses import (
    CreatedAwardData,
    EvaluatedAwardData,
    RequirementResponsesData,
    UnsuccessfulAwardsData,
)

__all__ = [
    # Models
    "Award",
    "AwardStatus",
    "AwardStatusDetails",
    "Document",
    "DocumentType",
    "RequirementResponse",
    "Supplier",
    "Value",
    # Commands
    "ReferenceVocabulary",
    "SupplierSpec",
    "AwardSpec",
    "CreateAwardContext",
    "CreateAwardData",
    "DocumentSpec",
    "EvaluationSpec",
    "EvaluateAwardContext",
    "EvaluateAwardData",
    "AddRequirementResponseParams",
    "OperationType",
    "CreateUnsuccessfulAwardsParams",
    # Results
    "CreatedAwardData",
    "EvaluatedAwardData",
    "RequirementResponsesData",
    "UnsuccessfulAwardsData",
    # Storage
    "AwardRecord",
    "AwardRepository",
    "AwardPeriodRepository",
    "SQLiteAwardRepository",
    "SQLiteAwardPeriodRepository",
]
