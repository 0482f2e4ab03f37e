"""System events API - recent alerts for the dashboard feed."""
import json
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models import SystemEvent
from ..schemas.events import EventsResponse, SystemEventResponse
from ..utils.time_format import format_time_ago

router = APIRouter(prefix="/api/events", tags=["events"])

EVENTS_WINDOW_HOURS = 24
EVENTS_LIMIT = 50


def _parse_metadata(raw):
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


@router.get("", response_model=EventsResponse)
async def list_recent_events(db: AsyncSession = Depends(get_db)):
    """Events from the last 24 hours, newest first."""
    now = datetime.utcnow()
    cutoff = now - timedelta(hours=EVENTS_WINDOW_HOURS)

    result = await db.execute(
        select(SystemEvent)
        .where(SystemEvent.created_at >= cutoff)
        .order_by(SystemEvent.created_at.desc())
        .limit(EVENTS_LIMIT)
    )
    events = result.scalars().all()

    return EventsResponse(data=[
        SystemEventResponse(
            id=event.id,
            site_id=event.site_id,
            event_type=event.event_type,
            severity=event.severity,
            description=event.description,
            metadata=_parse_metadata(event.event_metadata),
            created_at=event.created_at,
            time_ago=format_time_ago(event.created_at, now),
        )
        for event in events
    ])
