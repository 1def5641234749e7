"""Callable functions."""

import logging

from fastapi import APIRouter, Header, Request
from pydantic import BaseModel

from ...errors import FitTrackError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions", tags=["functions"])


class DuplicateWeekRequest(BaseModel):
    """Arguments of the duplicateWeek callable."""

    programId: str | None = None
    weekId: str | None = None


@router.post("/duplicateWeek")
async def duplicate_week(
    request: Request,
    payload: DuplicateWeekRequest,
    x_user_id: str | None = Header(default=None),
):
    """Duplicate a week with its workouts, exercises and sets."""
    cascade = request.app.state.cascade
    try:
        mapping = await cascade.duplicate_week(x_user_id, payload.programId, payload.weekId)
    except FitTrackError:
        raise
    except Exception as exc:
        logger.exception("duplicateWeek error")
        raise FitTrackError("Duplication failed. See logs for details.") from exc

    return {"success": True, "mapping": mapping.to_dict()}
