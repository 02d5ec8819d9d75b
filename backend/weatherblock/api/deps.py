from __future__ import annotations

from fastapi import HTTPException, Request

from weatherblock.services.block import BlockHandle


def get_block(request: Request) -> BlockHandle:
    handle = getattr(request.app.state, "block", None)
    if handle is None:
        raise HTTPException(status_code=503, detail="Weather block is not configured")
    return handle
