"""Typed request and response models for the split API."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    error: str
    code: str
    details: Optional[Dict[str, Any]] = None
    stack: Optional[str] = None


class SplitFile(BaseModel):
    """One generated file; ``content`` inline in memory mode, ``path`` in disk mode."""
    filename: str
    rows: int
    content: Optional[str] = None
    path: Optional[str] = None


class SplitResponse(BaseModel):
    success: bool = True
    message: str
    files: List[SplitFile]
    totalRows: int
    maxRowsPerFile: int
    runId: Optional[str] = None


class ZipRequest(BaseModel):
    runId: str
    filenames: List[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    version: str
    storageMode: str
    maxUploadBytes: int
    maxRowsPerFileLimit: int
    requestTimeoutSeconds: float
