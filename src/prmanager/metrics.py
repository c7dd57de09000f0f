"""Prometheus business metrics for PR Manager.

One ServiceMetrics instance is created at startup and handed to the
service façade. Counters live on an injected CollectorRegistry so tests and
multiple app instances never collide on the global default registry.

Every increment is fire-and-forget: a failing collector is logged and
swallowed so it can never fail a business operation.
"""

from __future__ import annotations

from typing import Protocol

from prometheus_client import CollectorRegistry, Counter

from prmanager.logging import get_logger

logger = get_logger(__name__)


class MetricsSink(Protocol):
    """Business event counters consumed by the service façade."""

    def inc_team_created(self) -> None: ...

    def inc_user_activated(self) -> None: ...

    def inc_user_deactivated(self) -> None: ...

    def inc_pull_request_created(self) -> None: ...

    def inc_pull_request_merged(self) -> None: ...

    def inc_pull_request_reassigned(self) -> None: ...


class ServiceMetrics:
    """Prometheus counters for business events.

    Attributes:
        registry: Registry the counters are registered on.
    """

    def __init__(
        self,
        service_name: str,
        registry: CollectorRegistry | None = None,
        namespace: str = "pr_manager",
    ) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        labels = {"service": service_name}

        def counter(name: str, documentation: str) -> Counter:
            metric = Counter(
                name,
                documentation,
                labelnames=list(labels),
                namespace=namespace,
                registry=self.registry,
            )
            return metric.labels(**labels)

        self._team_created = counter("teams_created", "Total number of created teams")
        self._user_activated = counter("users_activated", "Total number of user activations")
        self._user_deactivated = counter(
            "users_deactivated", "Total number of user deactivations"
        )
        self._pr_created = counter(
            "pull_requests_created", "Total number of created pull requests"
        )
        self._pr_merged = counter("pull_requests_merged", "Total number of merged pull requests")
        self._pr_reassigned = counter(
            "pull_requests_reassigned", "Total number of reviewer reassignments"
        )

    def _inc(self, metric: Counter, name: str) -> None:
        try:
            metric.inc()
        except Exception as exc:
            logger.warning("metric_increment_failed", metric=name, error=str(exc))

    def inc_team_created(self) -> None:
        self._inc(self._team_created, "teams_created")

    def inc_user_activated(self) -> None:
        self._inc(self._user_activated, "users_activated")

    def inc_user_deactivated(self) -> None:
        self._inc(self._user_deactivated, "users_deactivated")

    def inc_pull_request_created(self) -> None:
        self._inc(self._pr_created, "pull_requests_created")

    def inc_pull_request_merged(self) -> None:
        self._inc(self._pr_merged, "pull_requests_merged")

    def inc_pull_request_reassigned(self) -> None:
        self._inc(self._pr_reassigned, "pull_requests_reassigned")


class NullMetrics:
    """Metrics sink used when metrics are disabled."""

    def inc_team_created(self) -> None:
        pass

    def inc_user_activated(self) -> None:
        pass

    def inc_user_deactivated(self) -> None:
        pass

    def inc_pull_request_created(self) -> None:
        pass

    def inc_pull_request_merged(self) -> None:
        pass

    def inc_pull_request_reassigned(self) -> None:
        pass
