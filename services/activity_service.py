# services/activity_service.py
"""
Activity log - the "recent activity" feed on the dashboard.

Logging an activity is best effort: a failure is logged and never fails the
operation being recorded.
"""
import logging
from typing import List, Optional

from schemas import ActivityCreate, ActivityRead
from .exceptions import StoreError
from .store import EntityStore

logger = logging.getLogger(__name__)


def log_activity(
     store: EntityStore,
     user_id: str,
     action: str,
     type: str,
     property_id: Optional[str] = None,
) -> Optional[str]:
     """Record that user_id did something; returns the activity id, or None if it could not be stored."""
     try:
          return store.activities.create(ActivityCreate(
               user_id=user_id,
               action=action,
               type=type,
               property_id=property_id,
          ))
     except (StoreError, ValueError):
          logger.exception("Failed to log activity %r for user %s", action, user_id)
          return None


def recent_activities(store: EntityStore, user_id: str, limit: int = 10) -> List[ActivityRead]:
     """The user's most recent activities, newest first."""
     return store.activities.get_by_field("user_id", user_id)[:limit]
