"""
Event Store service for append-only audit logging.

All state mutations are logged here in the same transaction as the change,
so a rolled-back operation leaves no audit row behind either.
"""

import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel
from sqlalchemy import select, and_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from unitportal.kernel.models.base import utcnow
from unitportal.kernel.models.event_log import EventLog, EventType


class EventStore:
    """
    Service for managing the immutable event log.

    Rows are stamped with the owning service's clock, so an event and the
    change it records carry the same instant.

    Usage:
        event_store = EventStore(session, clock=self.clock)
        await event_store.log(
            event_type=EventType.NEWS_PUBLISHED,
            entity_type="news_post",
            entity_id=post.id,
            actor_id=actor.id,
            payload={"title": post.title},
        )
    """

    def __init__(self, session: AsyncSession, clock: Callable[[], datetime] = utcnow):
        self.session = session
        self.clock = clock

    async def log(
        self,
        event_type: EventType,
        entity_type: str,
        entity_id: uuid.UUID,
        actor_id: Optional[uuid.UUID] = None,
        payload: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ) -> EventLog:
        """
        Log an event to the immutable audit log.

        Args:
            event_type: The type of event
            entity_type: The type of entity (personnel, award, news_post, ...)
            entity_id: The ID of the entity
            actor_id: The member who triggered the event (None for system events)
            payload: Additional event data
            ip_address: Client IP address
            occurred_at: Event instant; defaults to the store's clock

        Returns:
            The created EventLog record
        """
        if payload:
            payload = self._serialize_payload(payload)

        event = EventLog(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            actor_id=actor_id,
            payload=payload or {},
            ip_address=ip_address,
            created_at=occurred_at or self.clock(),
        )

        self.session.add(event)
        # Caller's transaction commits it together with the change
        return event

    async def log_from_model(
        self,
        event_type: EventType,
        entity_type: str,
        entity_id: uuid.UUID,
        actor_id: Optional[uuid.UUID],
        payload_model: BaseModel,
        ip_address: Optional[str] = None,
    ) -> EventLog:
        """Log an event using a Pydantic model as payload."""
        if "timestamp" in payload_model.model_fields_set:
            occurred_at = payload_model.timestamp
        else:
            # Unstamped payloads take the store's clock
            occurred_at = self.clock()
            payload_model = payload_model.model_copy(update={"timestamp": occurred_at})
        payload = payload_model.model_dump(mode="json")
        return await self.log(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            actor_id=actor_id,
            payload=payload,
            ip_address=ip_address,
            occurred_at=occurred_at,
        )

    async def get_entity_history(
        self,
        entity_type: str,
        entity_id: uuid.UUID,
        event_types: Optional[List[EventType]] = None,
        limit: int = 100,
    ) -> List[EventLog]:
        """
        Get the event history for a specific entity, newest first.

        Args:
            entity_type: The type of entity
            entity_id: The ID of the entity
            event_types: Optional filter for specific event types
            limit: Maximum number of events to return
        """
        query = select(EventLog).where(
            and_(
                EventLog.entity_type == entity_type,
                EventLog.entity_id == entity_id,
            )
        )

        if event_types:
            query = query.where(EventLog.event_type.in_([e.value for e in event_types]))

        query = query.order_by(desc(EventLog.created_at)).limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_events(
        self,
        event_type: EventType,
        since: Optional[datetime] = None,
        limit: int = 100,
    ) -> List[EventLog]:
        """Get events of one type, oldest first (for collaborators replaying signals)."""
        query = select(EventLog).where(EventLog.event_type == event_type.value)
        if since:
            query = query.where(EventLog.created_at >= since)
        query = query.order_by(EventLog.created_at).limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    def _serialize_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Convert payload values to JSON-serializable types."""
        result = {}
        for key, value in payload.items():
            if isinstance(value, uuid.UUID):
                result[key] = str(value)
            elif isinstance(value, datetime):
                result[key] = value.isoformat()
            elif isinstance(value, dict):
                result[key] = self._serialize_payload(value)
            elif isinstance(value, list):
                result[key] = [
                    self._serialize_payload(v) if isinstance(v, dict)
                    else str(v) if isinstance(v, uuid.UUID)
                    else v.isoformat() if isinstance(v, datetime)
                    else v
                    for v in value
                ]
            else:
                result[key] = value
        return result
