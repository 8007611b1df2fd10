"""
Prometheus metrics collection for the award evaluation service.

Provides observability into workflow throughput, rejections by error code,
and the status-details transitions actually taken.
"""

import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from prometheus_client import Counter, Histogram, start_http_server

from award_evaluation.kernel.errors import EvaluationError

# ============================================================================
# Workflow Metrics
# ============================================================================

award_workflow_duration_seconds = Histogram(
    "award_workflow_duration_seconds",
    "Duration of award workflow processing in seconds",
    ["workflow"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

award_workflows_processed_total = Counter(
    "award_workflows_processed_total",
    "Total number of award workflows processed",
    ["workflow", "outcome"],  # outcome: success, error code, or failure
)

# ============================================================================
# Award Metrics
# ============================================================================

awards_created_total = Counter(
    "awards_created_total",
    "Total number of awards created",
    ["status"],
)

award_status_transitions_total = Counter(
    "award_status_transitions_total",
    "Total number of applied status details transitions",
    ["from_status", "to_status"],
)

# ============================================================================
# Helper Functions
# ============================================================================

P = ParamSpec("P")
R = TypeVar("R")


def track_workflow(workflow: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator to track workflow duration and outcome.

    Typed evaluation errors are counted under their error code so rejected
    requests can be told apart from crashes.

    Args:
        workflow: Name of the workflow being processed

    Returns:
        Decorated function that tracks duration and outcome
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()
            outcome = "success"
            try:
                return func(*args, **kwargs)
            except EvaluationError as exc:
                outcome = exc.code
                raise
            except Exception:
                outcome = "failure"
                raise
            finally:
                award_workflow_duration_seconds.labels(workflow=workflow).observe(
                    time.perf_counter() - start
                )
                award_workflows_processed_total.labels(
                    workflow=workflow, outcome=outcome
                ).inc()

        return wrapper

    return decorator


def start_metrics_server(port: int = 9090) -> None:
    """
    Start Prometheus metrics HTTP server.

    Args:
        port: Port to listen on (default: 9090)
    """
    start_http_server(port)
