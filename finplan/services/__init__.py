"""Services package."""

from finplan.services.storage import (
    AuditStorageInterface,
    FinanceDataSource,
    InMemoryAuditStorage,
    InMemoryDataSource,
    NotFoundError,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "FinanceDataSource",
    "InMemoryAuditStorage",
    "InMemoryDataSource",
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
]
