# api/routers/stats.py

from typing import Optional

from fastapi import APIRouter, Depends, Query

from dexmetrics.services import VolumeService
from ..dependencies import get_logger, get_volume_service, http_error, json_response

router = APIRouter()


@router.get("/volume")
def get_volume_stats(
    force: bool = Query(default=False),
    volume: VolumeService = Depends(get_volume_service),
    logger = Depends(get_logger)
):
    """Platform swap volume, last 24h/30d against the window before, plus TVL"""
    try:
        return json_response(volume.volume_stats(force=force))
    except Exception as e:
        raise http_error(e, logger, "Error computing volume statistics")


@router.get("/tvl-volume-history")
def get_tvl_volume_history(
    range: Optional[str] = Query(default="30d", description="7d, 30d or 90d"),
    force: bool = Query(default=False),
    volume: VolumeService = Depends(get_volume_service),
    logger = Depends(get_logger)
):
    """Daily TVL and volume points"""
    try:
        return json_response(volume.tvl_volume_history(range, force=force))
    except Exception as e:
        raise http_error(e, logger, "Error fetching TVL/volume history", range=range)
