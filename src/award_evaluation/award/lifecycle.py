"""
Award Lifecycle

The status-details state machine applied by evaluation, and the lot-awarded
flag reported by creation.

State machine (stored → requested → result):

    EMPTY        → ACTIVE → ACTIVE        EMPTY        → UNSUCCESSFUL → UNSUCCESSFUL
    ACTIVE       → ACTIVE → ACTIVE        ACTIVE       → UNSUCCESSFUL → UNSUCCESSFUL
    UNSUCCESSFUL → ACTIVE → ACTIVE        UNSUCCESSFUL → UNSUCCESSFUL → UNSUCCESSFUL

Anything stored outside the table is corrupt data, not a bad request.
"""

from collections.abc import Iterable

from award_evaluation.award.models import Award, AwardStatusDetails
from award_evaluation.kernel.errors import InvalidStatusDetails, StatusDetailsSavedAward

_ACTIVE = AwardStatusDetails.ACTIVE
_EMPTY = AwardStatusDetails.EMPTY
_UNSUCCESSFUL = AwardStatusDetails.UNSUCCESSFUL

STATUS_DETAILS_TRANSITIONS: dict[
    AwardStatusDetails, dict[AwardStatusDetails, AwardStatusDetails]
] = {
    _ACTIVE: {
        _EMPTY: _ACTIVE,
        _ACTIVE: _ACTIVE,
        _UNSUCCESSFUL: _ACTIVE,
    },
    _UNSUCCESSFUL: {
        _EMPTY: _UNSUCCESSFUL,
        _ACTIVE: _UNSUCCESSFUL,
        _UNSUCCESSFUL: _UNSUCCESSFUL,
    },
}


def next_status_details(
    award_id: str,
    stored: AwardStatusDetails,
    requested: AwardStatusDetails,
) -> AwardStatusDetails:
    """
    Resolve the status details an evaluation leaves behind

    Args:
        award_id: Award being evaluated (for error reporting)
        stored: Status details currently persisted
        requested: Status details requested by the buyer

    Returns:
        New status details

    Raises:
        InvalidStatusDetails: If the requested value is not evaluable
        StatusDetailsSavedAward: If the stored value is outside the table
    """
    by_stored = STATUS_DETAILS_TRANSITIONS.get(requested)
    if by_stored is None:
        raise InvalidStatusDetails(requested.value)

    result = by_stored.get(stored)
    if result is None:
        raise StatusDetailsSavedAward(award_id, stored.value)
    return result


def derive_lot_awarded(awards: Iterable[Award], lot_id: str) -> bool | None:
    """
    Tri-state lot-awarded flag for a creation response

    Returns:
        None  - no award references the lot, one of them is PENDING/ACTIVE
                or one of them is still PENDING/EMPTY
        False - awards reference the lot but none of them is in flight
    """
    selected = [award for award in awards if lot_id in award.related_lots]
    if not selected:
        return None

    if any(award.is_pending_with(_ACTIVE) for award in selected):
        return None

    if any(award.is_pending_with(_EMPTY) for award in selected):
        return None

    return False
