"""
Award Domain Models

Awards, their suppliers and documents, following the OCDS award shape.
Enum values use the OCDS code lists verbatim so stored bodies stay readable
next to published release data.

Fun fact: an OCDS award is not a contract - it records the decision, and the
contract that follows gets its own record. That is why an award can be
evaluated back and forth between active and unsuccessful before signing.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from typing import Any

from pydantic import BaseModel, Field, SerializationInfo, field_serializer, field_validator

# Serialization context under which requirement response values are written
# with their kind, so a stored "12.5" string does not come back as a Decimal
TYPED_VALUES_CONTEXT = {"typed_values": True}


class AwardStatus(str, Enum):
    """
    Coarse award lifecycle state

    The creation workflow only ever produces PENDING. UNSUCCESSFUL is
    produced for lots that closed without any offer to award.
    """

    PENDING = "pending"
    ACTIVE = "active"
    UNSUCCESSFUL = "unsuccessful"
    CANCELLED = "cancelled"


class AwardStatusDetails(str, Enum):
    """
    Fine-grained award state

    Evaluation transitions (see lifecycle.next_status_details):
    EMPTY → ACTIVE | UNSUCCESSFUL
    ACTIVE ⇄ UNSUCCESSFUL

    NO_OFFERS_RECEIVED and LOT_CANCELLED belong to system-created
    unsuccessful awards and are never evaluated.
    """

    EMPTY = "empty"
    ACTIVE = "active"
    UNSUCCESSFUL = "unsuccessful"
    NO_OFFERS_RECEIVED = "noOffersReceived"
    LOT_CANCELLED = "lotCancelled"


class DocumentType(str, Enum):
    """Document types accepted on awards (OCDS documentType code list subset)"""

    AWARD_NOTICE = "awardNotice"
    EVALUATION_REPORTS = "evaluationReports"
    SHORTLISTED_FIRMS = "shortlistedFirms"
    CONTRACT_DRAFT = "contractDraft"
    WINNING_BID = "winningBid"
    COMPLAINTS = "complaints"
    BIDDERS = "bidders"
    CONFLICT_OF_INTEREST = "conflictOfInterest"
    CANCELLATION_DETAILS = "cancellationDetails"
    SUBMISSION_DOCUMENTS = "submissionDocuments"
    CONTRACT_ARRANGEMENTS = "contractArrangements"
    CONTRACT_SCHEDULE = "contractSchedule"


class Value(BaseModel):
    """Monetary amount of an award"""

    amount: Decimal = Field(..., ge=0, description="Award amount")
    currency: str = Field(..., min_length=1, description="ISO 4217 currency code")


class Identifier(BaseModel):
    """Organization identifier within a registration scheme"""

    scheme: str = Field(..., description="Register the id is drawn from (e.g. MD-IDNO)")
    id: str = Field(..., description="Identifier within the scheme")
    legal_name: str = Field(..., description="Registered legal name")
    uri: str | None = Field(default=None, description="Link to the register entry")

    @field_validator("scheme", "id")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Scheme and id are concatenated into the supplier id - no blanks"""
        if not v or not v.strip():
            raise ValueError("Identifier scheme and id cannot be empty")
        return v


class AddressDetail(BaseModel):
    """One classified part of an address (country, region or locality)"""

    scheme: str | None = Field(default=None, description="Classification scheme")
    id: str = Field(..., description="Code within the scheme")
    description: str | None = Field(default=None, description="Human readable name")
    uri: str | None = Field(default=None, description="Link to the classification entry")


class AddressDetails(BaseModel):
    """Classified address parts"""

    country: AddressDetail
    region: AddressDetail
    locality: AddressDetail


class Address(BaseModel):
    """Postal address of a supplier"""

    street_address: str = Field(..., description="Street and building")
    postal_code: str | None = Field(default=None, description="Postal code")
    address_details: AddressDetails


class ContactPoint(BaseModel):
    """Supplier contact person"""

    name: str
    email: str
    telephone: str
    fax_number: str | None = None
    url: str | None = None


class SupplierDetails(BaseModel):
    """Declared supplier classification"""

    scale: str = Field(..., description="Declared size class (e.g. micro, sme, large)")


class Supplier(BaseModel):
    """
    Organization reference attached to an award

    The id is derived from the primary identifier (scheme-id) when the award
    is created and is what uniqueness rules compare.
    """

    id: str = Field(..., description="Canonical supplier id: {scheme}-{id}")
    name: str = Field(..., min_length=1, description="Supplier name")
    identifier: Identifier
    additional_identifiers: list[Identifier] = Field(default_factory=list)
    address: Address
    contact_point: ContactPoint
    details: SupplierDetails


class Document(BaseModel):
    """
    Document attached to an award

    Identity is the id. On re-submission title, description and type are
    overwritten, related lots are kept from the first submission.
    """

    id: str = Field(..., description="Stable document id")
    document_type: DocumentType
    title: str | None = None
    description: str | None = None
    related_lots: list[str] = Field(default_factory=list)


class OrganizationRef(BaseModel):
    """Reference to an organization by id"""

    id: str


class RequirementRef(BaseModel):
    """Reference to a tender requirement by id"""

    id: str


class Responder(BaseModel):
    """Person answering a requirement on behalf of a tenderer"""

    id: str
    name: str


class RequirementResponse(BaseModel):
    """A tenderer's answer to one tender requirement"""

    id: str = Field(..., description="Response id")
    value: bool | int | Decimal | str = Field(..., description="Answer value")
    related_tenderer: OrganizationRef
    requirement: RequirementRef
    responder: Responder

    @field_validator("value", mode="before")
    @classmethod
    def decode_typed_value(cls, v: Any) -> Any:
        """Unwrap a stored {kind, value} pair into its Python type"""
        if isinstance(v, dict) and set(v) == {"kind", "value"}:
            kind = v["kind"]
            if kind not in _VALUE_DECODERS:
                raise ValueError(f"Unknown requirement response value kind '{kind}'")
            return _VALUE_DECODERS[kind](v["value"])
        return v

    @field_serializer("value")
    def encode_typed_value(self, value: Any, info: SerializationInfo) -> Any:
        if info.context and info.context.get("typed_values"):
            stored = str(value) if isinstance(value, Decimal) else value
            return {"kind": _value_kind(value), "value": stored}
        return value


_VALUE_DECODERS = {
    "boolean": bool,
    "integer": int,
    "number": Decimal,
    "string": str,
}


def _value_kind(value: Any) -> str:
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, Decimal):
        return "number"
    return "string"


class Award(BaseModel):
    """
    Award aggregate

    Created once by the creation workflow, then changed only by evaluation
    (description, documents, status details, date) and requirement responses.
    Related lots, value and suppliers never change after creation.
    """

    id: str = Field(..., description="Unique award id")
    token: str = Field(..., description="Secret evaluation credential")
    status: AwardStatus
    status_details: AwardStatusDetails
    related_lots: list[str] = Field(..., min_length=1, description="Lots the award covers")
    date: datetime = Field(..., description="Last modification date")
    title: str | None = None
    description: str | None = None
    value: Value | None = None
    suppliers: list[Supplier] = Field(default_factory=list)
    documents: list[Document] = Field(default_factory=list)
    requirement_responses: list[RequirementResponse] = Field(default_factory=list)

    def is_pending_with(self, status_details: AwardStatusDetails) -> bool:
        """True for a PENDING award in the given status details"""
        return (
            self.status == AwardStatus.PENDING
            and self.status_details == status_details
        )

    def supplier_ids(self) -> list[str]:
        return [supplier.id for supplier in self.suppliers]
