"""
Service bootstrap - wire settings, logging, metrics and storage

Example:
    >>> from award_evaluation import create_award_service
    >>> service = create_award_service()
    >>> created = service.create(context, data)
    >>> service.evaluate(evaluate_context, evaluate_data)
"""

from award_evaluation.award.repository import (
    SQLiteAwardPeriodRepository,
    SQLiteAwardRepository,
)
from award_evaluation.award.service import AwardService
from award_evaluation.kernel.ids import IdGenerator, default_id_generator
from award_evaluation.kernel.logging import configure_logging, get_logger
from award_evaluation.kernel.metrics import start_metrics_server
from award_evaluation.kernel.settings import ServiceSettings

logger = get_logger(__name__)


def create_award_service(
    settings: ServiceSettings | None = None,
    id_generator: IdGenerator = default_id_generator,
) -> AwardService:
    """
    Build a ready-to-use AwardService backed by SQLite

    Args:
        settings: Runtime settings (read from the environment if None)
        id_generator: Source of award ids and tokens

    Returns:
        AwardService with both repositories on settings.sqlite_path
    """
    settings = settings or ServiceSettings.from_env()

    configure_logging(json_output=settings.json_logs, log_level=settings.log_level)

    if settings.metrics_port is not None:
        start_metrics_server(settings.metrics_port)

    service = AwardService(
        award_repository=SQLiteAwardRepository(settings.sqlite_path),
        award_period_repository=SQLiteAwardPeriodRepository(settings.sqlite_path),
        id_generator=id_generator,
    )

    logger.info(
        "Award service ready",
        sqlite_path=str(settings.sqlite_path),
        metrics_port=settings.metrics_port,
    )
    return service
