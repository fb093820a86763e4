"""Route for triggering an event fetch from external sources."""

import logging

from fastapi import APIRouter, Depends

from ...services.access_policy import Actor, Operation, require
from ...services.ingestion import run_ingestion
from ..deps import get_current_actor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events/admin", tags=["admin"])


@router.post("/fetch-external")
def trigger_event_fetch(actor: Actor = Depends(get_current_actor)):
    """
    Fetch events from all enabled external sources.

    Runs the same pass as the scheduled job and returns once it is done.
    """
    require(Operation.FETCH_EXTERNAL, actor)
    logger.info(f"Manual ingestion triggered by {actor.username}")
    run_ingestion()

    return {
        "status": "success",
        "message": "External event fetch completed"
    }
