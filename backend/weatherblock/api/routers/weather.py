from __future__ import annotations

import re

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse

from weatherblock.api.deps import get_block
from weatherblock.domain.units import MeasurementSystem
from weatherblock.errors import ParseError, TransportError
from weatherblock.services.block import BlockAttributes, BlockHandle, render_block

router = APIRouter(tags=["weather"])

LOCATION_SEGMENT = re.compile(r"^[A-Za-z0-9%-]+$")


@router.get("/weatherdata/{location}")
def get_weatherdata(location: str, request: Request, handle: BlockHandle = Depends(get_block)) -> str:
    """
    Raw forecast body for a location, served from the cache when fresh.
    """
    if not LOCATION_SEGMENT.match(_raw_location_segment(request)):
        raise HTTPException(status_code=404, detail="No route was found matching the URL")
    try:
        return handle.fetcher.fetch_body(location)
    except TransportError:
        raise HTTPException(status_code=502, detail="Weather service is unavailable")
    except ParseError:
        raise HTTPException(status_code=502, detail="Weather service returned an unexpected response")


@router.get("/render", response_class=HTMLResponse)
def get_render(
    location: str = Query(""),
    measurementunit: MeasurementSystem = Query(MeasurementSystem.IMPERIAL),
    show_hourly: bool = Query(False, alias="showHourly"),
    handle: BlockHandle = Depends(get_block),
):
    attributes = BlockAttributes(location=location, measurementunit=measurementunit, show_hourly=show_hourly)
    return render_block(handle, attributes)


def _raw_location_segment(request: Request) -> str:
    # Match against the percent-encoded path, not the decoded parameter.
    raw_path = request.scope.get("raw_path") or request.url.path.encode()
    return raw_path.decode("latin-1").rstrip("/").rsplit("/", 1)[-1]
