"""File sink for export payloads."""

from __future__ import annotations

import logging
from pathlib import Path

import aiofiles

from .base import ExportPayload

logger = logging.getLogger(__name__)


async def save_payload(payload: ExportPayload, directory: str | Path) -> Path:
    """Write an export payload under `directory` using its suggested file name."""
    target_dir = Path(directory)
    if not target_dir.is_dir():
        raise FileNotFoundError(f"Export directory not found: {target_dir}")

    path = target_dir / Path(payload.filename).name
    async with aiofiles.open(path, mode="wb") as f:
        await f.write(payload.content)
    logger.info("Saved %s (%s, %d bytes)", path, payload.mime_type, len(payload.content))
    return path
