"""Operator commands: maintenance and ledger reconciliation"""
from .maintenance import MaintenanceRunner

__all__ = ["MaintenanceRunner"]
