"""
Custom exceptions for the award evaluation service

Every business-rule failure is a typed exception with a stable ``code``, so
callers can map failures onto their own transport without string matching.
Validation failures and corrupted persisted state live on separate branches
of the hierarchy: the first is the caller's fault, the second is ours.

Fun fact: OCDS (the Open Contracting Data Standard) was first released in
2014 - the award codes below follow its vocabulary rather than inventing one.
"""


class EvaluationError(Exception):
    """Base exception for all award evaluation errors"""

    code: str = "evaluation.error"


# ============================================================================
# Lookup Errors
# ============================================================================


class AwardNotFound(EvaluationError):
    """Raised when no award matches the requested identity"""

    code = "award.not.found"

    def __init__(self, cpid: str, award_id: str | None = None) -> None:
        self.cpid = cpid
        self.award_id = award_id
        if award_id:
            super().__init__(f"Award {award_id} not found in contract {cpid}")
        else:
            super().__init__(f"Award not found in contract {cpid}")


# ============================================================================
# Validation Errors (caller input violates a business rule)
# ============================================================================


class AwardValidationError(EvaluationError):
    """Base class for business-rule violations caused by request data"""

    code = "award.validation"


class UnknownSchemeIdentifier(AwardValidationError):
    """Raised when a supplier identifier scheme is not in the vocabulary"""

    code = "unknown.scheme.identifier"

    def __init__(self, scheme: str) -> None:
        self.scheme = scheme
        super().__init__(f"Undefined identifier scheme '{scheme}'")


class UnknownScaleSupplier(AwardValidationError):
    """Raised when a supplier scale is not in the vocabulary"""

    code = "unknown.scale.supplier"

    def __init__(self, scale: str) -> None:
        self.scale = scale
        super().__init__(f"Undefined supplier scale '{scale}'")


class SupplierNotUniqueInAward(AwardValidationError):
    """Raised when the same supplier appears twice in one award"""

    code = "supplier.not.unique.in.award"

    def __init__(self, supplier_id: str) -> None:
        self.supplier_id = supplier_id
        super().__init__(
            f"Supplier {supplier_id} is repeated - supplier identifiers should be unique in award"
        )


class SupplierNotUniqueInLot(AwardValidationError):
    """Raised when a supplier already has a pending award on the lot"""

    code = "supplier.not.unique.in.lot"

    def __init__(self, supplier_id: str, lot_id: str) -> None:
        self.supplier_id = supplier_id
        self.lot_id = lot_id
        super().__init__(
            f"Supplier {supplier_id} already has a pending award for lot {lot_id} - "
            "one supplier can not submit more than one offer per lot"
        )


class InvalidToken(AwardValidationError):
    """Raised when the request token does not match the stored token"""

    code = "token"

    def __init__(self) -> None:
        super().__init__("Invalid token")


class InvalidOwner(AwardValidationError):
    """Raised when the request owner does not own the award"""

    code = "owner"

    def __init__(self) -> None:
        super().__init__("Invalid owner")


class InvalidStatusDetails(AwardValidationError):
    """Raised when the requested status details are not ACTIVE or UNSUCCESSFUL"""

    code = "status.details"

    def __init__(self, requested: str) -> None:
        self.requested = requested
        super().__init__(f"Invalid status details value '{requested}'")


class AlreadyHaveActiveAwards(AwardValidationError):
    """Raised when another award on the same lots is already ACTIVE"""

    code = "already.have.active.awards"

    def __init__(self, award_id: str, active_award_ids: list[str]) -> None:
        self.award_id = award_id
        self.active_award_ids = active_award_ids
        super().__init__(
            f"Lot has already received successful award "
            f"(active: {', '.join(active_award_ids)})"
        )


class RelatedLotsMismatch(AwardValidationError):
    """Raised when document related lots do not cover the award's lots"""

    code = "related.lots"

    def __init__(self, missing_lots: list[str]) -> None:
        self.missing_lots = missing_lots
        super().__init__(
            f"Documents must relate to every lot of the award, missing: {', '.join(missing_lots)}"
        )


class UnknownRelatedTenderer(AwardValidationError):
    """Raised when a requirement response names a tenderer outside the award"""

    code = "unknown.related.tenderer"

    def __init__(self, tenderer_id: str, award_id: str) -> None:
        self.tenderer_id = tenderer_id
        self.award_id = award_id
        super().__init__(
            f"Tenderer {tenderer_id} is not a supplier of award {award_id}"
        )


class RequirementResponseNotUnique(AwardValidationError):
    """Raised when a requirement response id is already recorded on the award"""

    code = "requirement.response.not.unique"

    def __init__(self, response_id: str, award_id: str) -> None:
        self.response_id = response_id
        self.award_id = award_id
        super().__init__(
            f"Requirement response {response_id} already recorded on award {award_id}"
        )


# ============================================================================
# Integrity Errors (persisted state violates an invariant)
# ============================================================================


class DataIntegrityError(EvaluationError):
    """
    Raised when persisted data is in a state the workflows never produce

    Not an input error: retrying with different input will not help.
    Operators should treat it as a fault in stored data.
    """

    code = "data.integrity"


class AwardStoreError(DataIntegrityError):
    """Raised when a repository write does not match stored records"""

    code = "award.store"


class StatusDetailsSavedAward(DataIntegrityError):
    """Raised when a stored award carries status details outside the transition table"""

    code = "status.details.saved.award"

    def __init__(self, award_id: str, stored: str) -> None:
        self.award_id = award_id
        self.stored = stored
        super().__init__(
            f"Award {award_id} has unexpected saved status details '{stored}'"
        )
