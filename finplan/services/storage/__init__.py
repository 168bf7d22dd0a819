"""
Storage Services Package

Provides the abstract data-access interfaces and an in-memory
implementation. Hosts plug in their own backend by implementing
`FinanceDataSource`.
"""

from finplan.services.storage.interface import (
    AuditStorageInterface,
    FinanceDataSource,
    NotFoundError,
    StorageConnectionError,
    StorageError,
)
from finplan.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryDataSource,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "FinanceDataSource",
    # Exceptions
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryDataSource",
]
