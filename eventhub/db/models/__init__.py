from eventhub.db.models.event import Event, event_participants
from eventhub.db.models.user import User

__all__ = ["User", "Event", "event_participants"]
