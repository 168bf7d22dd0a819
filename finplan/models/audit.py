"""
Audit Models for finplan

Every dashboard refresh leaves a trail of audit events.
This provides:
1. Traceability of which data a figure was computed from
2. Debugging information when a data source misbehaves
3. A history of created snapshots

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Each stage of a dashboard refresh has its own event type.
    """
    # Data loading
    SNAPSHOT_LOAD_STARTED = "snapshot_load_started"
    SNAPSHOT_LOADED = "snapshot_loaded"
    DATA_SOURCE_ERROR = "data_source_error"

    # Computations
    PROFILE_COMPUTED = "profile_computed"
    ANALYTICS_COMPUTED = "analytics_computed"
    PROJECTION_GENERATED = "projection_generated"
    SIMULATION_RUN = "simulation_run"
    GOALS_EVALUATED = "goals_evaluated"

    # Snapshots
    FINANCIAL_SNAPSHOT_CREATED = "financial_snapshot_created"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'snapshot', 'projection', 'goal')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - all events of one dashboard refresh
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.snapshot_loaded(counts, correlation_id)
        event = AuditEventBuilder.projection_generated("base", 12, 6500.0, correlation_id)
    """

    @staticmethod
    def snapshot_load_started(correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOAD_STARTED,
            severity=AuditSeverity.DEBUG,
            entity_type="snapshot",
            correlation_id=correlation_id,
            description="Loading records from data source",
        )

    @staticmethod
    def snapshot_loaded(
        record_counts: dict[str, int],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOADED,
            entity_type="snapshot",
            correlation_id=correlation_id,
            description=f"Loaded {sum(record_counts.values())} records",
            details={"record_counts": record_counts},
        )

    @staticmethod
    def profile_computed(
        monthly_income: float,
        available_income: float,
        health_score: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_COMPUTED,
            entity_type="profile",
            correlation_id=correlation_id,
            description=f"Financial profile computed (health score {health_score})",
            details={
                "monthly_income": monthly_income,
                "available_income": available_income,
                "health_score": health_score,
            },
        )

    @staticmethod
    def analytics_computed(
        months: list[str],
        alert_count: int,
        missed_savings: float,
        correlation_id: UUID
    ) -> AuditEvent:
        severity = AuditSeverity.WARNING if alert_count else AuditSeverity.INFO
        return AuditEvent(
            event_type=AuditEventType.ANALYTICS_COMPUTED,
            severity=severity,
            entity_type="analytics",
            correlation_id=correlation_id,
            description=f"Analytics computed with {alert_count} inflation alerts",
            details={
                "window_start": months[0] if months else None,
                "window_end": months[-1] if months else None,
                "alert_count": alert_count,
                "total_missed_savings": missed_savings,
            },
        )

    @staticmethod
    def projection_generated(
        scenario: str,
        months: int,
        final_cash: float,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROJECTION_GENERATED,
            entity_type="projection",
            entity_id=scenario,
            correlation_id=correlation_id,
            description=f"{scenario.capitalize()} projection over {months} months",
            details={
                "scenario": scenario,
                "months": months,
                "final_cumulative_cash": final_cash,
            },
        )

    @staticmethod
    def simulation_run(
        monthly_contribution: float,
        fire_target: float,
        years_to_fire: Optional[float],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIMULATION_RUN,
            entity_type="simulation",
            correlation_id=correlation_id,
            description="Simulation run"
            + (f", FIRE in {years_to_fire:.1f} years" if years_to_fire is not None else ", FIRE not reached"),
            details={
                "monthly_contribution": monthly_contribution,
                "fire_target": fire_target,
                "years_to_fire": years_to_fire,
            },
        )

    @staticmethod
    def goals_evaluated(
        year: Optional[int],
        goal_count: int,
        on_track_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GOALS_EVALUATED,
            entity_type="goal",
            entity_id=str(year) if year is not None else None,
            correlation_id=correlation_id,
            description=f"Evaluated {goal_count} goals, {on_track_count} on track",
            details={
                "year": year,
                "goal_count": goal_count,
                "on_track_count": on_track_count,
            },
        )

    @staticmethod
    def financial_snapshot_created(
        snapshot_id: UUID,
        snapshot_date: str,
        net_worth: float,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FINANCIAL_SNAPSHOT_CREATED,
            entity_type="snapshot",
            entity_id=str(snapshot_id),
            correlation_id=correlation_id,
            description=f"Financial snapshot created for {snapshot_date}",
            details={
                "snapshot_date": snapshot_date,
                "net_worth": net_worth,
            },
        )

    @staticmethod
    def data_source_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_SOURCE_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Data source error during {operation}",
            error_message=error_message,
            details={"operation": operation},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
