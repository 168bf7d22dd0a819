"""
Audit Logger

DESIGN DECISION: Every dashboard refresh is logged.
This provides:
1. Traceability of the inputs behind each figure
2. Debugging capability when a data source misbehaves
3. A history of created snapshots

The audit logger:
- Is async so it fits the orchestrator's flow
- Gracefully handles failures (a broken audit store never breaks a refresh)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from finplan.config import get_settings
from finplan.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from finplan.services.storage import AuditStorageInterface


def configure_logging(level: Optional[str] = None) -> None:
    """Route structlog through stdlib logging as JSON lines."""
    logging.basicConfig(
        format="%(message)s",
        level=level or get_settings().app.log_level,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit store, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("finplan.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_snapshot_load_started(self, correlation_id: UUID) -> None:
        await self.log(AuditEventBuilder.snapshot_load_started(correlation_id))

    async def log_snapshot_loaded(
        self,
        record_counts: dict[str, int],
        correlation_id: UUID,
    ) -> None:
        """Log a completed data-source load."""
        event = AuditEventBuilder.snapshot_loaded(
            record_counts=record_counts,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_profile_computed(
        self,
        monthly_income: float,
        available_income: float,
        health_score: int,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.profile_computed(
            monthly_income=monthly_income,
            available_income=available_income,
            health_score=health_score,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_analytics_computed(
        self,
        months: list[str],
        alert_count: int,
        missed_savings: float,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.analytics_computed(
            months=months,
            alert_count=alert_count,
            missed_savings=missed_savings,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_projection_generated(
        self,
        scenario: str,
        months: int,
        final_cash: float,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.projection_generated(
            scenario=scenario,
            months=months,
            final_cash=final_cash,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_simulation_run(
        self,
        monthly_contribution: float,
        fire_target: float,
        years_to_fire: Optional[float],
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.simulation_run(
            monthly_contribution=monthly_contribution,
            fire_target=fire_target,
            years_to_fire=years_to_fire,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_goals_evaluated(
        self,
        year: Optional[int],
        goal_count: int,
        on_track_count: int,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.goals_evaluated(
            year=year,
            goal_count=goal_count,
            on_track_count=on_track_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_snapshot_created(
        self,
        snapshot_id: UUID,
        snapshot_date: str,
        net_worth: float,
        correlation_id: UUID,
    ) -> None:
        """Log creation of a financial snapshot."""
        event = AuditEventBuilder.financial_snapshot_created(
            snapshot_id=snapshot_id,
            snapshot_date=snapshot_date,
            net_worth=net_worth,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_data_source_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed data-source call."""
        event = AuditEventBuilder.data_source_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a dashboard refresh.
    Pass it through all subsequent operations.
    """
    return uuid4()
