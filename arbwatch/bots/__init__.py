"""Cycle driver for the opportunity watcher."""

from arbwatch.bots.watcher import (
    CycleOutcome,
    CycleState,
    CycleStatus,
    OpportunityWatcher,
    run_watcher,
)

__all__ = [
    "CycleOutcome",
    "CycleState",
    "CycleStatus",
    "OpportunityWatcher",
    "run_watcher",
]
