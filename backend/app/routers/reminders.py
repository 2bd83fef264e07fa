"""Operator route to run a reminder sweep on demand."""
import logging
from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from app.schemas.reminder import SweepResult
from app.services.reminder_sweeper import ReminderSweeper

logger = logging.getLogger(__name__)
router = APIRouter()


def get_reminder_sweeper(request: Request) -> ReminderSweeper:
    """The app-wide sweeper created in the lifespan hook."""
    return request.app.state.reminder_sweeper


@router.post("/sweep", response_model=SweepResult)
async def run_sweep(sweeper: ReminderSweeper = Depends(get_reminder_sweeper)):
    """Run one sweep now. Returns ``skipped`` if the periodic sweep is mid-run."""
    return await run_in_threadpool(sweeper.run_once)
