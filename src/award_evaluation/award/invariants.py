"""
Award Invariants

Pure validation functions for the award business rules. None of them touch
storage: callers load the awards they need and pass them in, which keeps
every rule testable with plain lists.
"""

from collections.abc import Iterable

from award_evaluation.award.commands import DocumentSpec, ReferenceVocabulary, SupplierSpec
from award_evaluation.award.models import (
    Award,
    AwardStatus,
    AwardStatusDetails,
    Identifier,
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

# Status details a buyer may request during evaluation
EVALUABLE_STATUS_DETAILS = {AwardStatusDetails.ACTIVE, AwardStatusDetails.UNSUCCESSFUL}


# ============================================================================
# Supplier Identity
# ============================================================================


def supplier_id(scheme: str, identifier_id: str) -> str:
    """
    Canonical supplier id: "{scheme}-{id}"

    Case-sensitive. Two suppliers are the same supplier exactly when their
    canonical ids are equal.

    Example:
        >>> supplier_id("CUST", "A1")
        'CUST-A1'
    """
    return f"{scheme}-{identifier_id}"


def supplier_id_of(identifier: Identifier) -> str:
    return supplier_id(identifier.scheme, identifier.id)


# ============================================================================
# Creation Rules
# ============================================================================


def validate_identifier_schemes(
    suppliers: list[SupplierSpec], vocabulary: ReferenceVocabulary
) -> None:
    """
    Every supplier identifier scheme must be a known scheme (case-insensitive)

    Raises:
        UnknownSchemeIdentifier: On the first supplier with an unknown scheme
    """
    schemes = {scheme.upper() for scheme in vocabulary.schemes}
    for supplier in suppliers:
        if supplier.identifier.scheme.upper() not in schemes:
            raise UnknownSchemeIdentifier(supplier.identifier.scheme)


def validate_supplier_scales(
    suppliers: list[SupplierSpec], vocabulary: ReferenceVocabulary
) -> None:
    """
    Every supplier scale must be a known scale (case-insensitive)

    Raises:
        UnknownScaleSupplier: On the first supplier with an unknown scale
    """
    scales = {scale.upper() for scale in vocabulary.scales}
    for supplier in suppliers:
        if supplier.details.scale.upper() not in scales:
            raise UnknownScaleSupplier(supplier.details.scale)


def validate_suppliers_unique_in_award(suppliers: list[SupplierSpec]) -> None:
    """
    No supplier may appear twice in one award

    Raises:
        SupplierNotUniqueInAward: On the first repeated canonical id
    """
    seen: set[str] = set()
    for supplier in suppliers:
        canonical_id = supplier_id_of(supplier.identifier)
        if canonical_id in seen:
            raise SupplierNotUniqueInAward(canonical_id)
        seen.add(canonical_id)


def validate_suppliers_unique_in_lot(
    lot_id: str, suppliers: list[SupplierSpec], awards: Iterable[Award]
) -> None:
    """
    A supplier may hold at most one pending award per lot

    Only PENDING awards on the lot count: unsuccessful or cancelled awards
    no longer block the supplier.

    Args:
        lot_id: Lot the new award is for
        suppliers: Suppliers of the new award
        awards: All awards already stored for the contract

    Raises:
        SupplierNotUniqueInLot: On the first supplier already pending on the lot
    """
    taken = {
        supplier_id_of(supplier.identifier)
        for award in awards
        if lot_id in award.related_lots and award.status == AwardStatus.PENDING
        for supplier in award.suppliers
    }
    if not taken:
        return

    for supplier in suppliers:
        canonical_id = supplier_id_of(supplier.identifier)
        if canonical_id in taken:
            raise SupplierNotUniqueInLot(canonical_id, lot_id)


# ============================================================================
# Evaluation Rules
# ============================================================================


def validate_requested_status_details(requested: AwardStatusDetails) -> None:
    """
    Buyers may only request ACTIVE or UNSUCCESSFUL

    Raises:
        InvalidStatusDetails: For any other value
    """
    if requested not in EVALUABLE_STATUS_DETAILS:
        raise InvalidStatusDetails(requested.value)


def validate_no_active_sibling(award: Award, siblings: Iterable[Award]) -> None:
    """
    A lot may have only one ACTIVE award

    Siblings are the other awards of the same contract stage. Those whose
    related lots cover every lot of this award compete with it.

    Args:
        award: Award about to become ACTIVE
        siblings: Awards of the same (cpid, stage), may include the award itself

    Raises:
        AlreadyHaveActiveAwards: If a competing sibling is already ACTIVE
    """
    lots = set(award.related_lots)
    active = [
        sibling.id
        for sibling in siblings
        if sibling.id != award.id
        and lots.issubset(sibling.related_lots)
        and sibling.status_details == AwardStatusDetails.ACTIVE
    ]
    if active:
        raise AlreadyHaveActiveAwards(award.id, active)


def validate_document_related_lots(award: Award, documents: list[DocumentSpec]) -> None:
    """
    Documents that name lots must, together, name every lot of the award

    Documents without related lots are not checked.

    Raises:
        RelatedLotsMismatch: If the union of document lots misses an award lot
    """
    document_lots = {
        lot_id for document in documents for lot_id in (document.related_lots or [])
    }
    if not document_lots:
        return

    missing = [lot_id for lot_id in award.related_lots if lot_id not in document_lots]
    if missing:
        raise RelatedLotsMismatch(missing)


# ============================================================================
# Requirement Response Rules
# ============================================================================


def validate_related_tenderer(award: Award, tenderer_id: str) -> None:
    """
    Raises:
        UnknownRelatedTenderer: If the tenderer is not one of the award's suppliers
    """
    if tenderer_id not in award.supplier_ids():
        raise UnknownRelatedTenderer(tenderer_id, award.id)


def validate_requirement_response_unique(award: Award, response_id: str) -> None:
    """
    Raises:
        RequirementResponseNotUnique: If the response id is already on the award
    """
    if any(response.id == response_id for response in award.requirement_responses):
        raise RequirementResponseNotUnique(response_id, award.id)
