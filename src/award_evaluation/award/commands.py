"""
Award Commands

Contexts and payloads for the award workflows. Shape checks (non-empty lists,
unique lot ids, allowed operation types) happen here at construction time;
business rules that need stored state are checked by the service.

Fun fact: the request/context split mirrors how the platform routes commands -
the context (who, where, when) is stamped by the platform, the data comes
from the buyer's own request.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from award_evaluation.award.models import (
    Address,
    AwardStatusDetails,
    ContactPoint,
    DocumentType,
    Identifier,
    RequirementResponse,
    SupplierDetails,
    Value,
)


def stage_from_ocid(ocid: str) -> str:
    """
    Extract the stage code from a stage-level process id

    ocid format: {cpid}-{stage}-{timestamp},
    e.g. "ocds-b3wdp1-MD-1580458690892-EV-1580458791896" → "EV"
    """
    parts = ocid.split("-")
    if len(parts) < 3 or not parts[-2]:
        raise ValueError(f"Cannot extract stage from ocid '{ocid}'")
    return parts[-2]


# ============================================================================
# Award Creation
# ============================================================================


class ReferenceVocabulary(BaseModel):
    """
    Valid identifier schemes and supplier scales for one request

    Supplied by the caller with every creation request (master data).
    Matching is case-insensitive.
    """

    schemes: list[str] = Field(default_factory=list, description="Valid identifier schemes")
    scales: list[str] = Field(default_factory=list, description="Valid supplier scales")


class SupplierSpec(BaseModel):
    """Supplier as submitted in a creation request (id not yet derived)"""

    name: str = Field(..., min_length=1)
    identifier: Identifier
    additional_identifiers: list[Identifier] = Field(default_factory=list)
    address: Address
    contact_point: ContactPoint
    details: SupplierDetails


class AwardSpec(BaseModel):
    """Award part of a creation request"""

    description: str | None = None
    value: Value
    suppliers: list[SupplierSpec] = Field(..., min_length=1)


class CreateAwardContext(BaseModel):
    """Platform context of a creation request"""

    cpid: str = Field(..., description="Contracting process id")
    stage: str = Field(..., description="Stage within the process")
    lot_id: str = Field(..., description="Lot the award is created for")
    owner: str = Field(..., description="Platform that will own the award")
    start_date: datetime = Field(..., description="Request date")


class CreateAwardData(BaseModel):
    """Buyer data of a creation request"""

    award: AwardSpec
    reference_vocabulary: ReferenceVocabulary


# ============================================================================
# Award Evaluation
# ============================================================================


class DocumentSpec(BaseModel):
    """Document as submitted in an evaluation request"""

    id: str
    document_type: DocumentType
    title: str | None = None
    description: str | None = None
    related_lots: list[str] | None = None

    @field_validator("related_lots")
    @classmethod
    def validate_related_lots_not_empty(cls, v: list[str] | None) -> list[str] | None:
        """Related lots may be omitted but not sent empty"""
        if v is not None and len(v) == 0:
            raise ValueError("The document contains empty list of related lots")
        return v


class EvaluationSpec(BaseModel):
    """Award part of an evaluation request"""

    status_details: AwardStatusDetails
    description: str | None = None
    documents: list[DocumentSpec] | None = None

    @field_validator("documents")
    @classmethod
    def validate_documents_not_empty(
        cls, v: list[DocumentSpec] | None
    ) -> list[DocumentSpec] | None:
        """Documents may be omitted but not sent empty"""
        if v is not None and len(v) == 0:
            raise ValueError("The award contains empty list of documents")
        return v


class EvaluateAwardContext(BaseModel):
    """Platform context of an evaluation request"""

    cpid: str
    stage: str
    award_id: str
    token: str
    owner: str
    start_date: datetime


class EvaluateAwardData(BaseModel):
    """Buyer data of an evaluation request"""

    award: EvaluationSpec


# ============================================================================
# Requirement Responses
# ============================================================================


class RequirementResponseAward(BaseModel):
    """Award the response is recorded against"""

    id: str
    requirement_response: RequirementResponse


class AddRequirementResponseParams(BaseModel):
    """Record a tenderer's requirement response on an award"""

    cpid: str
    ocid: str
    award: RequirementResponseAward

    @model_validator(mode="after")
    def validate_ocid_belongs_to_cpid(self) -> "AddRequirementResponseParams":
        if not self.ocid.startswith(f"{self.cpid}-"):
            raise ValueError(f"ocid '{self.ocid}' does not belong to cpid '{self.cpid}'")
        stage_from_ocid(self.ocid)
        return self

    @property
    def stage(self) -> str:
        return stage_from_ocid(self.ocid)


# ============================================================================
# Unsuccessful Awards
# ============================================================================


class OperationType(str, Enum):
    """Platform operation that triggered a command"""

    CREATE_SUBMISSION = "createSubmission"
    DECLARE_NON_CONFLICT_OF_INTEREST = "declareNonConflictOfInterest"
    LOT_CANCELLATION = "lotCancellation"
    SUBMISSION_PERIOD_END = "submissionPeriodEnd"
    TENDER_CANCELLATION = "tenderCancellation"
    TENDER_OR_LOT_AMENDMENT_CANCELLATION = "tenderOrLotAmendmentCancellation"
    TENDER_OR_LOT_AMENDMENT_CONFIRMATION = "tenderOrLotAmendmentConfirmation"


# Operations after which lots may close without an award
UNSUCCESSFUL_AWARD_OPERATIONS = {
    OperationType.SUBMISSION_PERIOD_END,
    OperationType.TENDER_OR_LOT_AMENDMENT_CONFIRMATION,
}


class CreateUnsuccessfulAwardsParams(BaseModel):
    """Create one unsuccessful award per lot that closed without an award"""

    cpid: str
    ocid: str
    lot_ids: list[str] = Field(..., min_length=1)
    date: datetime
    operation_type: OperationType

    @field_validator("lot_ids")
    @classmethod
    def validate_lot_ids_unique(cls, v: list[str]) -> list[str]:
        duplicates = sorted({lot_id for lot_id in v if v.count(lot_id) > 1})
        if duplicates:
            raise ValueError(f"lotIds must be unique, repeated: {', '.join(duplicates)}")
        return v

    @field_validator("operation_type")
    @classmethod
    def validate_operation_type_allowed(cls, v: OperationType) -> OperationType:
        if v not in UNSUCCESSFUL_AWARD_OPERATIONS:
            raise ValueError(
                f"Operation type '{v.value}' cannot create unsuccessful awards"
            )
        return v

    @model_validator(mode="after")
    def validate_ocid_belongs_to_cpid(self) -> "CreateUnsuccessfulAwardsParams":
        if not self.ocid.startswith(f"{self.cpid}-"):
            raise ValueError(f"ocid '{self.ocid}' does not belong to cpid '{self.cpid}'")
        stage_from_ocid(self.ocid)
        return self

    @property
    def stage(self) -> str:
        return stage_from_ocid(self.ocid)
