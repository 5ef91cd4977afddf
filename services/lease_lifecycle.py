# services/lease_lifecycle.py
"""
Lease Lifecycle Engine - time-based lease status.

The status stored on a lease is only a cache. active / expiring_soon /
expired are derived from end_date and the current time whenever a lease is
read; terminated and renewed are explicit and returned as stored.
"""
import logging
import math
import os
from datetime import datetime
from typing import Callable, Optional

from models import EXPLICIT_LEASE_STATUSES, LeaseStatus, utcnow
from .exceptions import PreconditionFailedError

logger = logging.getLogger(__name__)

LEASE_EXPIRING_SOON_DAYS = int(os.getenv("LEASE_EXPIRING_SOON_DAYS", "90"))

SECONDS_PER_DAY = 86400


class LeaseLifecycle:
     """
     Derives lease status and validates renewals.

     Args:
          expiring_soon_days: A lease ending within this many days is expiring_soon
          clock: Callable returning the current naive-UTC time
     """

     def __init__(self, expiring_soon_days: int = LEASE_EXPIRING_SOON_DAYS, clock: Callable = utcnow):
          self.expiring_soon_days = expiring_soon_days
          self.clock = clock

     def _now(self, now: Optional[datetime]) -> datetime:
          return now if now is not None else self.clock()

     def days_remaining(self, lease, now: Optional[datetime] = None) -> int:
          """Whole days until end_date, rounded up; negative once the lease has ended."""
          delta = lease.end_date - self._now(now)
          return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)

     def effective_status(self, lease, now: Optional[datetime] = None) -> LeaseStatus:
          stored = LeaseStatus(lease.status)
          if stored in EXPLICIT_LEASE_STATUSES:
               return stored
          now = self._now(now)
          if lease.end_date < now:
               return LeaseStatus.EXPIRED
          if self.days_remaining(lease, now) <= self.expiring_soon_days:
               return LeaseStatus.EXPIRING_SOON
          return LeaseStatus.ACTIVE

     def is_expiring_soon(self, lease, now: Optional[datetime] = None) -> bool:
          return self.effective_status(lease, now) == LeaseStatus.EXPIRING_SOON

     def with_derived_status(self, lease, now: Optional[datetime] = None):
          """Copy of a lease read model carrying its derived status and days remaining."""
          now = self._now(now)
          return lease.model_copy(update={
               "status": self.effective_status(lease, now),
               "days_remaining": self.days_remaining(lease, now),
          })

     def renewal_changes(self, lease, new_end_date: datetime, special_terms: Optional[str] = None,
                              now: Optional[datetime] = None) -> dict:
          """
          Validate a renewal and return the fields it writes.

          Raises:
               PreconditionFailedError: If the lease is terminated or superseded, or the new
                    end date is not in the future
          """
          now = self._now(now)
          if LeaseStatus(lease.status) == LeaseStatus.TERMINATED:
               raise PreconditionFailedError(f"lease {lease.id} is terminated and cannot be renewed")
          if LeaseStatus(lease.status) == LeaseStatus.RENEWED:
               raise PreconditionFailedError(f"lease {lease.id} was superseded; renew the current lease instead")
          if new_end_date <= now:
               raise PreconditionFailedError("new end date must be in the future")
          changes = {
               "end_date": new_end_date,
               "last_renewal_date": now,
               "status": LeaseStatus.ACTIVE.value,
          }
          if special_terms is not None:
               changes["special_terms"] = special_terms
          return changes

     def refresh_stored_statuses(self, store) -> int:
          """
          Rewrite stale stored statuses so the cached column matches the derived one.

          Returns:
               Number of leases updated
          """
          now = self._now(None)
          count = 0
          with store.batch():
               for lease in store.leases.get_all():
                    derived = self.effective_status(lease, now)
                    if derived.value != LeaseStatus(lease.status).value:
                         row = store.leases.get_row(lease.id, required=True)
                         store.leases.apply(row, {"status": derived.value})
                         count += 1
          if count:
               logger.info("Refreshed stored status of %d lease(s)", count)
          return count
