"""Sync module: role reconciliation between the members database and the guild."""

from .interfaces import RoleSyncServiceProtocol
from .resolver import RecordResolver
from .reconciler import Reconciler
from .sweep import SweepDriver, SweepReport
from .service import RoleSyncService, run_periodic_sweeps

__all__ = [
    "RoleSyncServiceProtocol",
    "RecordResolver",
    "Reconciler",
    "SweepDriver",
    "SweepReport",
    "RoleSyncService",
    "run_periodic_sweeps",
]
