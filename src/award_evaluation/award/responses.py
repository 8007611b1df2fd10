"""
Award Workflow Results

Read-only projections returned by the award workflows. Each one exposes
exactly the fields its workflow promises - no more - so stored data such as
another award's token cannot leak through a response.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from award_evaluation.award.models import (
    Award,
    AwardStatus,
    AwardStatusDetails,
    Document,
    RequirementResponse,
    Supplier,
    Value,
)


class CreatedAward(BaseModel):
    """Award as returned by the creation workflow"""

    id: str
    date: datetime
    status: AwardStatus
    status_details: AwardStatusDetails
    related_lots: list[str]
    description: str | None = None
    value: Value
    suppliers: list[Supplier]


class AwardPeriod(BaseModel):
    """Award period of a (cpid, stage) pair"""

    start_date: datetime


class CreatedAwardData(BaseModel):
    """
    Result of award creation

    The token is returned here once and is not retrievable afterwards.
    lot_awarded is None when unknown, False when the lot has no award in flight.
    """

    token: str
    award_period: AwardPeriod
    lot_awarded: bool | None = None
    award: CreatedAward

    @classmethod
    def from_award(
        cls, award: Award, award_period_start: datetime, lot_awarded: bool | None
    ) -> "CreatedAwardData":
        return cls(
            token=award.token,
            award_period=AwardPeriod(start_date=award_period_start),
            lot_awarded=lot_awarded,
            award=CreatedAward(
                id=award.id,
                date=award.date,
                status=award.status,
                status_details=award.status_details,
                related_lots=list(award.related_lots),
                description=award.description,
                value=award.value,
                suppliers=list(award.suppliers),
            ),
        )


class SupplierSummary(BaseModel):
    """Supplier id and name only"""

    id: str
    name: str


class EvaluatedAward(BaseModel):
    """Award as returned by the evaluation workflow"""

    id: str
    date: datetime
    description: str | None = None
    status: AwardStatus
    status_details: AwardStatusDetails
    related_lots: list[str]
    value: Value | None = None
    suppliers: list[SupplierSummary] = Field(default_factory=list)
    documents: list[Document] = Field(default_factory=list)


class EvaluatedAwardData(BaseModel):
    """Result of award evaluation"""

    award: EvaluatedAward

    @classmethod
    def from_award(cls, award: Award) -> "EvaluatedAwardData":
        return cls(
            award=EvaluatedAward(
                id=award.id,
                date=award.date,
                description=award.description,
                status=award.status,
                status_details=award.status_details,
                related_lots=list(award.related_lots),
                value=award.value,
                suppliers=[
                    SupplierSummary(id=supplier.id, name=supplier.name)
                    for supplier in award.suppliers
                ],
                documents=list(award.documents),
            )
        )


class RequirementResponsesData(BaseModel):
    """Result of recording a requirement response"""

    award_id: str
    requirement_responses: list[RequirementResponse]


class UnsuccessfulAward(BaseModel):
    """Award created for a lot that closed without an award"""

    id: str
    date: datetime
    status: AwardStatus
    status_details: AwardStatusDetails
    related_lots: list[str]


class UnsuccessfulAwardsData(BaseModel):
    """Result of unsuccessful award creation"""

    awards: list[UnsuccessfulAward]

    @classmethod
    def from_awards(cls, awards: list[Award]) -> "UnsuccessfulAwardsData":
        return cls(
            awards=[
                UnsuccessfulAward(
                    id=award.id,
                    date=award.date,
                    status=award.status,
                    status_details=award.status_details,
                    related_lots=list(award.related_lots),
                )
                for award in awards
            ]
        )
