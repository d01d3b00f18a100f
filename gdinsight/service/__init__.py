"""HTTP service mode for gdinsight."""

from .app import AnalysisService, create_app, run_service

__all__ = ["AnalysisService", "create_app", "run_service"]
