"""
Award Workflows

AwardService runs the four award workflows against injected repositories:
create, evaluate, add a requirement response, create unsuccessful awards.
Every rule is checked before the first write, so a rejected request leaves
storage untouched (the award period of a creation request is the only write
that happens ahead of the award itself).

Fun fact: the evaluation order (not found, token, owner, award id, rules) is
observable from outside - a caller with a stolen award id but a wrong token
learns nothing about the award's state.
"""

from datetime import datetime

from award_evaluation.award import invariants
from award_evaluation.award.commands import (
    AddRequirementResponseParams,
    CreateAwardContext,
    CreateAwardData,
    CreateUnsuccessfulAwardsParams,
    EvaluateAwardContext,
    EvaluateAwardData,
    OperationType,
)
from award_evaluation.award.documents import reconcile_documents
from award_evaluation.award.lifecycle import derive_lot_awarded, next_status_details
from award_evaluation.award.models import (
    Award,
    AwardStatus,
    AwardStatusDetails,
    Supplier,
)
from award_evaluation.award.repository import (
    AwardPeriodRepository,
    AwardRecord,
    AwardRepository,
)
from award_evaluation.award.responses import (
    CreatedAwardData,
    EvaluatedAwardData,
    RequirementResponsesData,
    UnsuccessfulAwardsData,
)
from award_evaluation.kernel.errors import AwardNotFound, InvalidOwner, InvalidToken
from award_evaluation.kernel.ids import IdGenerator, default_id_generator
from award_evaluation.kernel.logging import LogOperation, get_logger
from award_evaluation.kernel.metrics import (
    award_status_transitions_total,
    awards_created_total,
    track_workflow,
)

logger = get_logger(__name__)

# Reason recorded on awards created for lots that closed without an award
UNSUCCESSFUL_STATUS_DETAILS = {
    OperationType.SUBMISSION_PERIOD_END: AwardStatusDetails.NO_OFFERS_RECEIVED,
    OperationType.TENDER_OR_LOT_AMENDMENT_CONFIRMATION: AwardStatusDetails.LOT_CANCELLED,
}


class AwardService:
    """
    Award creation and evaluation workflows

    Stateless between calls: everything a workflow needs comes from its
    arguments and the repositories.
    """

    def __init__(
        self,
        award_repository: AwardRepository,
        award_period_repository: AwardPeriodRepository,
        id_generator: IdGenerator = default_id_generator,
    ):
        """
        Initialize the service with its collaborators

        Args:
            award_repository: Storage of award records
            award_period_repository: Storage of award period starts
            id_generator: Source of award ids and tokens
        """
        self.award_repository = award_repository
        self.award_period_repository = award_period_repository
        self.id_generator = id_generator

    # ========================================================================
    # Creation
    # ========================================================================

    @track_workflow("create_award")
    def create(self, context: CreateAwardContext, data: CreateAwardData) -> CreatedAwardData:
        """
        Create a pending award for one lot

        Validates:
        - Supplier identifier schemes and scales are in the reference vocabulary
        - No supplier appears twice in the award
        - No supplier already holds a pending award on the lot

        Args:
            context: Platform context (cpid, stage, lot, owner, request date)
            data: Award data and reference vocabulary

        Returns:
            Created award with its token, award period and lot-awarded flag
        """
        with LogOperation(
            logger,
            "create_award",
            cpid=context.cpid,
            stage=context.stage,
            lot_id=context.lot_id,
            owner=context.owner,
        ):
            suppliers = data.award.suppliers
            invariants.validate_identifier_schemes(suppliers, data.reference_vocabulary)
            invariants.validate_supplier_scales(suppliers, data.reference_vocabulary)
            invariants.validate_suppliers_unique_in_award(suppliers)

            awards = [
                record.award
                for record in self.award_repository.find_by_contract(context.cpid)
            ]
            invariants.validate_suppliers_unique_in_lot(context.lot_id, suppliers, awards)

            lot_awarded = derive_lot_awarded(awards, context.lot_id)

            award = Award(
                id=self.id_generator.new_award_id(),
                token=self.id_generator.new_token(),
                status=AwardStatus.PENDING,
                status_details=AwardStatusDetails.EMPTY,
                related_lots=[context.lot_id],
                date=context.start_date,
                description=data.award.description,
                value=data.award.value,
                suppliers=[
                    Supplier(
                        id=invariants.supplier_id_of(supplier.identifier),
                        **supplier.model_dump(),
                    )
                    for supplier in suppliers
                ],
            )

            award_period_start = self._init_award_period(
                context.cpid, context.stage, context.start_date
            )

            self.award_repository.insert(
                AwardRecord.of(context.cpid, context.stage, context.owner, award)
            )
            awards_created_total.labels(status=award.status.value).inc()

            logger.info(
                "Award created",
                cpid=context.cpid,
                award_id=award.id,
                lot_id=context.lot_id,
                suppliers=len(award.suppliers),
                lot_awarded=lot_awarded,
            )

            return CreatedAwardData.from_award(award, award_period_start, lot_awarded)

    def _init_award_period(self, cpid: str, stage: str, start_date: datetime) -> datetime:
        """Existing award period start, or the request date stored as the new one"""
        start = self.award_period_repository.find_start(cpid, stage)
        if start is not None:
            return start
        return self.award_period_repository.save_start(cpid, stage, start_date)

    # ========================================================================
    # Evaluation
    # ========================================================================

    @track_workflow("evaluate_award")
    def evaluate(
        self, context: EvaluateAwardContext, data: EvaluateAwardData
    ) -> EvaluatedAwardData:
        """
        Record the buyer's decision on an award

        Checks run in a fixed order: award found, token, owner, award id,
        requested status details (plus the one-active-award-per-lot rule),
        document related lots. Only then are documents merged and the new
        status details applied.

        Args:
            context: Platform context (cpid, stage, award id, token, owner, request date)
            data: Requested status details, description and documents

        Returns:
            Evaluated award (suppliers reduced to id and name)

        Raises:
            AwardNotFound: No award for the token, or award id mismatch
            InvalidToken: Token does not match the stored award
            InvalidOwner: Owner does not own the award
            InvalidStatusDetails: Requested value is not ACTIVE or UNSUCCESSFUL
            AlreadyHaveActiveAwards: Another award on the lots is already ACTIVE
            RelatedLotsMismatch: Documents do not cover the award's lots
            StatusDetailsSavedAward: Stored status details are outside the table
        """
        with LogOperation(
            logger,
            "evaluate_award",
            cpid=context.cpid,
            stage=context.stage,
            award_id=context.award_id,
            token=context.token,
            owner=context.owner,
        ):
            record = self.award_repository.find_one(context.cpid, context.stage, context.token)
            if record is None:
                raise AwardNotFound(context.cpid, context.award_id)

            award = record.award
            if record.token != context.token or award.token != context.token:
                raise InvalidToken()
            if record.owner != context.owner:
                raise InvalidOwner()
            if award.id != context.award_id:
                raise AwardNotFound(context.cpid, context.award_id)

            requested = data.award.status_details
            invariants.validate_requested_status_details(requested)
            if requested == AwardStatusDetails.ACTIVE:
                siblings = [
                    sibling.award
                    for sibling in self.award_repository.find_by_contract(
                        context.cpid, context.stage
                    )
                ]
                invariants.validate_no_active_sibling(award, siblings)

            requested_documents = data.award.documents or []
            invariants.validate_document_related_lots(award, requested_documents)

            documents = reconcile_documents(requested_documents, award.documents)
            new_status_details = next_status_details(award.id, award.status_details, requested)

            updated = award.model_copy(
                update={
                    "description": data.award.description,
                    "documents": documents,
                    "status_details": new_status_details,
                    "date": context.start_date,
                }
            )
            self.award_repository.update(record.with_award(updated))

            award_status_transitions_total.labels(
                from_status=award.status_details.value,
                to_status=new_status_details.value,
            ).inc()
            logger.info(
                "Award evaluated",
                cpid=context.cpid,
                award_id=award.id,
                from_status=award.status_details.value,
                to_status=new_status_details.value,
                documents=len(documents),
            )

            return EvaluatedAwardData.from_award(updated)

    # ========================================================================
    # Requirement Responses
    # ========================================================================

    @track_workflow("add_requirement_response")
    def add_requirement_response(
        self, params: AddRequirementResponseParams
    ) -> RequirementResponsesData:
        """
        Record a tenderer's requirement response on an award

        Validates:
        - Award exists in the stage named by the ocid
        - The responding tenderer is one of the award's suppliers
        - The response id is not already recorded on the award

        Returns:
            Award id and all of its requirement responses
        """
        stage = params.stage
        with LogOperation(
            logger,
            "add_requirement_response",
            cpid=params.cpid,
            stage=stage,
            award_id=params.award.id,
        ):
            record = next(
                (
                    candidate
                    for candidate in self.award_repository.find_by_contract(params.cpid, stage)
                    if candidate.award.id == params.award.id
                ),
                None,
            )
            if record is None:
                raise AwardNotFound(params.cpid, params.award.id)

            award = record.award
            response = params.award.requirement_response
            invariants.validate_related_tenderer(award, response.related_tenderer.id)
            invariants.validate_requirement_response_unique(award, response.id)

            updated = award.model_copy(
                update={"requirement_responses": [*award.requirement_responses, response]}
            )
            self.award_repository.update(record.with_award(updated))

            return RequirementResponsesData(
                award_id=updated.id,
                requirement_responses=list(updated.requirement_responses),
            )

    # ========================================================================
    # Unsuccessful Awards
    # ========================================================================

    @track_workflow("create_unsuccessful_awards")
    def create_unsuccessful_awards(
        self, params: CreateUnsuccessfulAwardsParams
    ) -> UnsuccessfulAwardsData:
        """
        Create one unsuccessful award per lot that closed without an award

        The status details record why: no offers at submission period end,
        or the lot cancelled by a confirmed amendment. These awards have no
        owner, value or suppliers.

        Args:
            params: Contract, lots, date and the triggering operation

        Returns:
            The created awards
        """
        stage = params.stage
        status_details = UNSUCCESSFUL_STATUS_DETAILS[params.operation_type]
        with LogOperation(
            logger,
            "create_unsuccessful_awards",
            cpid=params.cpid,
            stage=stage,
            lots=len(params.lot_ids),
            operation_type=params.operation_type.value,
        ):
            awards = [
                Award(
                    id=self.id_generator.new_award_id(),
                    token=self.id_generator.new_token(),
                    status=AwardStatus.UNSUCCESSFUL,
                    status_details=status_details,
                    related_lots=[lot_id],
                    date=params.date,
                )
                for lot_id in params.lot_ids
            ]

            self.award_repository.insert_all(
                [AwardRecord.of(params.cpid, stage, None, award) for award in awards]
            )
            for award in awards:
                awards_created_total.labels(status=award.status.value).inc()

            return UnsuccessfulAwardsData.from_awards(awards)
