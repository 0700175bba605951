"""Root directory configuration endpoints.

The active root lives in memory only; a restart falls back to settings.

Example call:
    curl -X PUT http://localhost:5000/api/config/root \
        -H 'Content-Type: application/json' \
        -d '{"path":"/mnt/media"}'
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from media_browser.storage.errors import MediaNotFoundError
from media_browser.storage.paths import RootContext
from media_browser.storage.root import current_root, get_root_store


logger = logging.getLogger("media_browser.config")

router = APIRouter(prefix="/api/config", tags=["config"])


class RootDirectoryRequest(BaseModel):
    path: Path = Field(description="Existing directory to expose as the media root")


class RootDirectoryResponse(BaseModel):
    path: str
    case_insensitive: bool

    @classmethod
    def from_context(cls, context: RootContext) -> "RootDirectoryResponse":
        return cls(path=str(context.path), case_insensitive=context.case_insensitive)


@router.get("/root", response_model=RootDirectoryResponse)
async def get_root_directory(root: RootContext = Depends(current_root)) -> RootDirectoryResponse:
    return RootDirectoryResponse.from_context(root)


@router.put("/root", response_model=RootDirectoryResponse)
def set_root_directory(payload: RootDirectoryRequest) -> RootDirectoryResponse:
    try:
        context = get_root_store().replace(payload.path)
    except MediaNotFoundError as exc:
        logger.info("root_replace_rejected", extra={"path": str(payload.path)})
        raise HTTPException(status_code=400, detail="Root directory does not exist or is not a directory") from exc
    return RootDirectoryResponse.from_context(context)
