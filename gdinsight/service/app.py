"""FastAPI application entrypoint for gdinsight service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import ConfigError, GDInsightConfig, load_config
from ..extractor import GDScriptExtractor
from ..models import AnalysisOptions, BatchResult
from ..orchestrator import BatchOrchestrator
from ..repo_scanner import RepoScanner


class AnalyzeRequest(BaseModel):
    root: str
    recursive: bool = True
    include: str = "*.gd"
    exclude: List[str] = Field(default_factory=list)
    directory_analysis: bool = False
    options: Optional[Dict[str, bool]] = None


class AnalyzeResponse(BaseModel):
    status: str
    summary: Dict[str, Any]
    insights: Dict[str, Any]
    cross_references: Dict[str, Any]
    directory: Optional[Dict[str, Any]] = None
    records: List[Dict[str, Any]]


class HealthResponse(BaseModel):
    status: str


class AnalysisService:
    """Scans a project root and runs the batch pipeline over it."""

    def __init__(
        self,
        scanner: RepoScanner | None = None,
        orchestrator_factory: Callable[[Path, GDInsightConfig], BatchOrchestrator] | None = None,
    ) -> None:
        self.scanner = scanner or RepoScanner()
        self._orchestrator_factory = orchestrator_factory or _default_orchestrator

    def analyze(self, request: AnalyzeRequest) -> BatchResult:
        root = Path(request.root).expanduser().resolve()
        if not root.is_dir():
            raise FileNotFoundError(f"Project path not found: {request.root}")
        try:
            config = load_config(root)
        except ConfigError:
            config = GDInsightConfig(root=root)

        options = (
            AnalysisOptions.from_mapping(request.options)
            if request.options is not None
            else config.options
        )
        paths = self.scanner.scan(
            str(root),
            recursive=request.recursive,
            include=request.include,
            exclude=list(config.scan.exclude_paths) + list(request.exclude),
        )
        orchestrator = self._orchestrator_factory(root, config)
        return orchestrator.run(
            paths,
            options,
            directory_analysis=request.directory_analysis or config.directory_analysis,
        )


def _default_orchestrator(root: Path, config: GDInsightConfig) -> BatchOrchestrator:
    return BatchOrchestrator(
        GDScriptExtractor(project_root=root),
        timeout=config.extractor_timeout,
        thresholds=config.thresholds,
    )


def _default_service() -> AnalysisService:
    return AnalysisService()


def create_app(
    service_factory: Callable[[], AnalysisService] = _default_service,
) -> FastAPI:
    """Create the FastAPI application exposing gdinsight analysis."""

    app = FastAPI(title="GDInsight Service", version="1.0.0")

    async def get_service() -> AnalysisService:
        # Lazy-instantiate per request to keep state predictable.
        return service_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze", response_model=AnalyzeResponse)
    async def analyze(
        payload: AnalyzeRequest,
        service: AnalysisService = Depends(get_service),
    ) -> AnalyzeResponse:
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, service.analyze, payload)
        data = result.to_dict()
        return AnalyzeResponse(status=result.summary.status, **data)

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(
        _: Any, exc: FileNotFoundError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)


__all__ = ["AnalysisService", "AnalyzeRequest", "AnalyzeResponse", "create_app", "run_service"]
