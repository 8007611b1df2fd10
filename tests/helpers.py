"""
Test Helper Functions - Builders for award requests

Builders return valid request models by default; tests override only the
field they are about, which keeps each test focused on one rule.

Fun fact: "MD-IDNO" is the Moldovan state identification number register -
the scheme used by the platform these award codes were first written for.
"""

from datetime import datetime, timezone
from decimal import Decimal

from award_evaluation.award.commands import (
    AwardSpec,
    CreateAwardContext,
    CreateAwardData,
    DocumentSpec,
    EvaluateAwardContext,
    EvaluateAwardData,
    EvaluationSpec,
    ReferenceVocabulary,
    SupplierSpec,
)
from award_evaluation.award.models import (
    Address,
    AddressDetail,
    AddressDetails,
    Award,
    AwardStatus,
    AwardStatusDetails,
    ContactPoint,
    DocumentType,
    Identifier,
    SupplierDetails,
    Value,
)
from award_evaluation.award.responses import CreatedAwardData

CPID = "ocds-b3wdp1-MD-1580458690892"
STAGE = "EV"
OCID = f"{CPID}-{STAGE}-1580458791896"
OWNER = "platform-1"
START_DATE = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)

VALID_SCHEMES = ["MD-IDNO", "MD-CUATM"]
VALID_SCALES = ["micro", "sme", "large"]


def build_supplier(
    identifier_id: str = "1001",
    scheme: str = "MD-IDNO",
    scale: str = "micro",
    name: str | None = None,
) -> SupplierSpec:
    """
    Builder for a supplier as submitted in a creation request

    Example:
        >>> build_supplier("1001").identifier.scheme
        'MD-IDNO'
    """
    return SupplierSpec(
        name=name or f"Supplier {identifier_id}",
        identifier=Identifier(
            scheme=scheme,
            id=identifier_id,
            legal_name=f"Supplier {identifier_id} SRL",
        ),
        address=Address(
            street_address="Str. Stefan cel Mare 1",
            postal_code="MD-2001",
            address_details=AddressDetails(
                country=AddressDetail(scheme="iso-alpha2", id="MD", description="Moldova"),
                region=AddressDetail(scheme="CUATM", id="0101000", description="Chisinau"),
                locality=AddressDetail(scheme="CUATM", id="0101001", description="Chisinau city"),
            ),
        ),
        contact_point=ContactPoint(
            name="Ion Popescu",
            email="office@example.md",
            telephone="+37322000000",
        ),
        details=SupplierDetails(scale=scale),
    )


def build_create_data(
    suppliers: list[SupplierSpec] | None = None,
    amount: Decimal = Decimal("1000.00"),
    description: str | None = "Award for lot",
    schemes: list[str] | None = None,
    scales: list[str] | None = None,
) -> CreateAwardData:
    """Builder for creation data with a default valid vocabulary"""
    return CreateAwardData(
        award=AwardSpec(
            description=description,
            value=Value(amount=amount, currency="MDL"),
            suppliers=suppliers if suppliers is not None else [build_supplier()],
        ),
        reference_vocabulary=ReferenceVocabulary(
            schemes=VALID_SCHEMES if schemes is None else schemes,
            scales=VALID_SCALES if scales is None else scales,
        ),
    )


def build_create_context(
    lot_id: str = "lot-1",
    cpid: str = CPID,
    stage: str = STAGE,
    owner: str = OWNER,
    start_date: datetime = START_DATE,
) -> CreateAwardContext:
    return CreateAwardContext(
        cpid=cpid, stage=stage, lot_id=lot_id, owner=owner, start_date=start_date
    )


def build_document(
    document_id: str = "doc-1",
    related_lots: list[str] | None = None,
    title: str | None = "Evaluation report",
    description: str | None = None,
    document_type: DocumentType = DocumentType.EVALUATION_REPORTS,
) -> DocumentSpec:
    return DocumentSpec(
        id=document_id,
        document_type=document_type,
        title=title,
        description=description,
        related_lots=related_lots,
    )


def build_evaluate_context(
    created: CreatedAwardData,
    cpid: str = CPID,
    stage: str = STAGE,
    owner: str = OWNER,
    token: str | None = None,
    award_id: str | None = None,
    start_date: datetime = datetime(2025, 2, 1, 9, 30, 0, tzinfo=timezone.utc),
) -> EvaluateAwardContext:
    """
    Builder for an evaluation context targeting a created award

    Token and award id default to the ones returned by creation.
    """
    return EvaluateAwardContext(
        cpid=cpid,
        stage=stage,
        award_id=award_id if award_id is not None else created.award.id,
        token=token if token is not None else created.token,
        owner=owner,
        start_date=start_date,
    )


def build_evaluate_data(
    status_details: AwardStatusDetails = AwardStatusDetails.ACTIVE,
    description: str | None = "Evaluated",
    documents: list[DocumentSpec] | None = None,
) -> EvaluateAwardData:
    return EvaluateAwardData(
        award=EvaluationSpec(
            status_details=status_details,
            description=description,
            documents=documents,
        )
    )


def build_award(
    award_id: str = "award-1",
    related_lots: list[str] | None = None,
    status: AwardStatus = AwardStatus.PENDING,
    status_details: AwardStatusDetails = AwardStatusDetails.EMPTY,
    supplier_ids: list[str] | None = None,
) -> Award:
    """
    Builder for a stored award, for rules that take awards directly

    supplier_ids are identifier ids under the MD-IDNO scheme.
    """
    suppliers = []
    for identifier_id in supplier_ids or []:
        spec = build_supplier(identifier_id)
        suppliers.append({"id": f"MD-IDNO-{identifier_id}", **spec.model_dump()})

    return Award(
        id=award_id,
        token=f"token-{award_id}",
        status=status,
        status_details=status_details,
        related_lots=related_lots or ["lot-1"],
        date=START_DATE,
        value=Value(amount=Decimal("1000.00"), currency="MDL"),
        suppliers=suppliers,
    )
