"""Architectural insight for GDScript projects."""

from .models import AnalysisOptions, BatchResult, StructuralRecord
from .orchestrator import BatchOrchestrator

__all__ = ["AnalysisOptions", "BatchOrchestrator", "BatchResult", "StructuralRecord"]

__version__ = "0.1.0"
