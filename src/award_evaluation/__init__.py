"""
Award Evaluation - award creation and evaluation for tendering processes

Creates pending awards for lots, evaluates them to active or unsuccessful,
merges evaluation documents and guards the rules around suppliers and lots.

Fun fact: a single tender can be split into hundreds of lots, and every one
of them may end up with its own award - or its own unsuccessful one.
"""

from award_evaluation.award.service import AwardService
from award_evaluation.bootstrap import create_award_service

__version__ = "0.1.0"
__all__ = ["AwardService", "create_award_service", "__version__"]
