"""Reconcilers that decide which day totals still need uploading."""

from wfm_sync.reconcilers.day_reconciler import Reconciler, ReconciliationResult

__all__ = ["Reconciler", "ReconciliationResult"]
