"""
Tests for award invariants

Every rule is a pure function over request models and stored awards, so
these tests need no storage at all.
"""

import pytest

from award_evaluation.award.commands import ReferenceVocabulary
from award_evaluation.award.invariants import (
    supplier_id,
    validate_document_related_lots,
    validate_identifier_schemes,
    validate_no_active_sibling,
    validate_related_tenderer,
    validate_requested_status_details,
    validate_requirement_response_unique,
    validate_supplier_scales,
    validate_suppliers_unique_in_award,
    validate_suppliers_unique_in_lot,
)
from award_evaluation.award.models import (
    AwardStatus,
    AwardStatusDetails,
    OrganizationRef,
    RequirementRef,
    RequirementResponse,
    Responder,
)
from award_evaluation.kernel.errors import (
    AlreadyHaveActiveAwards,
    InvalidStatusDetails,
    RelatedLotsMismatch,
    RequirementResponseNotUnique,
    SupplierNotUniqueInAward,
    SupplierNotUniqueInLot,
    UnknownRelatedTenderer,
    UnknownScaleSupplier,
    UnknownSchemeIdentifier,
)
from tests.helpers import build_award, build_document, build_supplier

VOCABULARY = ReferenceVocabulary(schemes=["MD-IDNO"], scales=["micro", "sme"])


# =============================================================================
# Supplier Identity
# =============================================================================


def test_supplier_id_concatenates_scheme_and_id() -> None:
    assert supplier_id("CUST", "A1") == "CUST-A1"


def test_supplier_id_is_deterministic() -> None:
    assert supplier_id("CUST", "A1") == supplier_id("CUST", "A1")


def test_supplier_id_is_case_sensitive() -> None:
    assert supplier_id("cust", "a1") != supplier_id("CUST", "A1")


# =============================================================================
# Vocabulary Rules
# =============================================================================


def test_known_scheme_passes_case_insensitively() -> None:
    validate_identifier_schemes([build_supplier(scheme="md-idno")], VOCABULARY)


def test_unknown_scheme_rejected() -> None:
    with pytest.raises(UnknownSchemeIdentifier) as exc_info:
        validate_identifier_schemes(
            [build_supplier("1"), build_supplier("2", scheme="XX-REG")], VOCABULARY
        )

    assert exc_info.value.scheme == "XX-REG"
    assert exc_info.value.code == "unknown.scheme.identifier"


def test_empty_scheme_vocabulary_rejects_everything() -> None:
    with pytest.raises(UnknownSchemeIdentifier):
        validate_identifier_schemes([build_supplier()], ReferenceVocabulary(scales=["micro"]))


def test_known_scale_passes_case_insensitively() -> None:
    validate_supplier_scales([build_supplier(scale="SME")], VOCABULARY)


def test_unknown_scale_rejected() -> None:
    with pytest.raises(UnknownScaleSupplier) as exc_info:
        validate_supplier_scales([build_supplier(scale="giant")], VOCABULARY)

    assert exc_info.value.scale == "giant"


# =============================================================================
# Supplier Uniqueness
# =============================================================================


def test_distinct_suppliers_are_unique_in_award() -> None:
    validate_suppliers_unique_in_award([build_supplier("1"), build_supplier("2")])


def test_repeated_supplier_in_award_rejected() -> None:
    with pytest.raises(SupplierNotUniqueInAward) as exc_info:
        validate_suppliers_unique_in_award(
            [build_supplier("1"), build_supplier("2"), build_supplier("1", name="Other name")]
        )

    assert exc_info.value.supplier_id == "MD-IDNO-1"


def test_same_id_under_different_scheme_is_a_different_supplier() -> None:
    validate_suppliers_unique_in_award(
        [build_supplier("1", scheme="MD-IDNO"), build_supplier("1", scheme="MD-CUATM")]
    )


def test_supplier_with_pending_award_on_lot_rejected() -> None:
    existing = build_award(related_lots=["lot-1"], supplier_ids=["1001"])

    with pytest.raises(SupplierNotUniqueInLot) as exc_info:
        validate_suppliers_unique_in_lot("lot-1", [build_supplier("1001")], [existing])

    assert exc_info.value.supplier_id == "MD-IDNO-1001"
    assert exc_info.value.lot_id == "lot-1"


def test_supplier_with_pending_award_on_other_lot_allowed() -> None:
    existing = build_award(related_lots=["lot-2"], supplier_ids=["1001"])

    validate_suppliers_unique_in_lot("lot-1", [build_supplier("1001")], [existing])


@pytest.mark.parametrize("status", [AwardStatus.UNSUCCESSFUL, AwardStatus.CANCELLED, AwardStatus.ACTIVE])
def test_only_pending_awards_block_supplier(status: AwardStatus) -> None:
    existing = build_award(related_lots=["lot-1"], status=status, supplier_ids=["1001"])

    validate_suppliers_unique_in_lot("lot-1", [build_supplier("1001")], [existing])


def test_pending_award_with_other_suppliers_does_not_block() -> None:
    existing = build_award(related_lots=["lot-1"], supplier_ids=["2002"])

    validate_suppliers_unique_in_lot("lot-1", [build_supplier("1001")], [existing])


# =============================================================================
# Evaluation Rules
# =============================================================================


@pytest.mark.parametrize("requested", [AwardStatusDetails.ACTIVE, AwardStatusDetails.UNSUCCESSFUL])
def test_evaluable_status_details_accepted(requested: AwardStatusDetails) -> None:
    validate_requested_status_details(requested)


@pytest.mark.parametrize(
    "requested",
    [
        AwardStatusDetails.EMPTY,
        AwardStatusDetails.NO_OFFERS_RECEIVED,
        AwardStatusDetails.LOT_CANCELLED,
    ],
)
def test_other_status_details_rejected(requested: AwardStatusDetails) -> None:
    with pytest.raises(InvalidStatusDetails) as exc_info:
        validate_requested_status_details(requested)

    assert exc_info.value.requested == requested.value


def test_active_sibling_on_same_lot_rejected() -> None:
    award = build_award("award-1", related_lots=["lot-1"])
    sibling = build_award("award-2", related_lots=["lot-1"], status_details=AwardStatusDetails.ACTIVE)

    with pytest.raises(AlreadyHaveActiveAwards) as exc_info:
        validate_no_active_sibling(award, [award, sibling])

    assert exc_info.value.active_award_ids == ["award-2"]


def test_active_sibling_covering_more_lots_rejected() -> None:
    award = build_award("award-1", related_lots=["lot-1"])
    sibling = build_award(
        "award-2", related_lots=["lot-1", "lot-2"], status_details=AwardStatusDetails.ACTIVE
    )

    with pytest.raises(AlreadyHaveActiveAwards):
        validate_no_active_sibling(award, [sibling])


def test_active_sibling_on_other_lot_allowed() -> None:
    award = build_award("award-1", related_lots=["lot-1"])
    sibling = build_award("award-2", related_lots=["lot-2"], status_details=AwardStatusDetails.ACTIVE)

    validate_no_active_sibling(award, [sibling])


def test_active_sibling_covering_only_part_of_the_lots_allowed() -> None:
    award = build_award("award-1", related_lots=["lot-1", "lot-2"])
    sibling = build_award("award-2", related_lots=["lot-1"], status_details=AwardStatusDetails.ACTIVE)

    validate_no_active_sibling(award, [sibling])


def test_award_itself_is_not_its_own_sibling() -> None:
    award = build_award("award-1", status_details=AwardStatusDetails.ACTIVE)

    validate_no_active_sibling(award, [award])


def test_non_active_siblings_allowed() -> None:
    award = build_award("award-1")
    siblings = [
        build_award("award-2", status_details=AwardStatusDetails.UNSUCCESSFUL),
        build_award("award-3", status_details=AwardStatusDetails.EMPTY),
    ]

    validate_no_active_sibling(award, siblings)


def test_documents_without_related_lots_are_not_checked() -> None:
    award = build_award(related_lots=["lot-1"])

    validate_document_related_lots(award, [build_document("doc-1"), build_document("doc-2")])


def test_documents_covering_award_lots_pass() -> None:
    award = build_award(related_lots=["lot-1", "lot-2"])
    documents = [
        build_document("doc-1", related_lots=["lot-1"]),
        build_document("doc-2", related_lots=["lot-2", "lot-3"]),
    ]

    validate_document_related_lots(award, documents)


def test_documents_missing_an_award_lot_rejected() -> None:
    award = build_award(related_lots=["lot-1", "lot-2"])

    with pytest.raises(RelatedLotsMismatch) as exc_info:
        validate_document_related_lots(award, [build_document("doc-1", related_lots=["lot-1"])])

    assert exc_info.value.missing_lots == ["lot-2"]
    assert exc_info.value.code == "related.lots"


# =============================================================================
# Requirement Response Rules
# =============================================================================


def _response(response_id: str = "rr-1", tenderer_id: str = "MD-IDNO-1001") -> RequirementResponse:
    return RequirementResponse(
        id=response_id,
        value=True,
        related_tenderer=OrganizationRef(id=tenderer_id),
        requirement=RequirementRef(id="req-1"),
        responder=Responder(id="person-1", name="Ion Popescu"),
    )


def test_related_tenderer_must_be_award_supplier() -> None:
    award = build_award(supplier_ids=["1001"])

    validate_related_tenderer(award, "MD-IDNO-1001")
    with pytest.raises(UnknownRelatedTenderer):
        validate_related_tenderer(award, "MD-IDNO-9999")


def test_requirement_response_id_must_be_new() -> None:
    award = build_award(supplier_ids=["1001"]).model_copy(
        update={"requirement_responses": [_response("rr-1")]}
    )

    validate_requirement_response_unique(award, "rr-2")
    with pytest.raises(RequirementResponseNotUnique):
        validate_requirement_response_unique(award, "rr-1")
