from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from timesplit.core.engine import distribute_work
from timesplit.core.schema import DistributionRequest, DistributionResult
from timesplit.core.validation import AllocationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["distribution"])


@router.post("/distribute", response_model=DistributionResult)
async def distribute(payload: DistributionRequest) -> DistributionResult:
    """Run the allocation engine on the posted request."""
    try:
        return distribute_work(payload)
    except AllocationError as exc:
        logger.info("rejected distribution request: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
