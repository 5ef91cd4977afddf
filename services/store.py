# services/store.py
"""
Entity Store - typed repositories over the SQL database, with a local cache tier.

Every collection gets a Repository with the same contract (create, get_by_id,
require, get_all, update, delete, get_by_* lookups). The store:
- validates creates and updates against the collection's pydantic schemas,
- stamps created_at / updated_at (updated_at strictly increases per write),
- resolves reference fields and fills the cached display names they imply,
- keeps those cached names in step when the source name changes,
- refuses deletes that would orphan a required reference and clears
  optional ones in the same batch.

Multi-record writes go through atomic_batch(): one transaction, flushed with
the optimistic version check on every touched row, committed at the
outermost level only.

Usage:
     store = EntityStore(db, cache=LocalCache("/var/cache/bottaye"))
     with store.batch():
          unit_id = store.units.create(UnitCreate(...))
"""
import logging
import os
import time
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Type

from pydantic import BaseModel
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from models import (
     Activity,
     Lease,
     Maintenance,
     MaintenanceStatus,
     Payment,
     PaymentStatus,
     Property,
     Tenant,
     Unit,
     UnitStatus,
     User,
     new_id,
     utcnow,
)
from schemas import (
     ActivityCreate,
     ActivityRead,
     LeaseCreate,
     LeaseRead,
     LeaseUpdate,
     MaintenanceCreate,
     MaintenanceRead,
     MaintenanceUpdate,
     PaymentCreate,
     PaymentRead,
     PaymentUpdate,
     PropertyCreate,
     PropertyRead,
     PropertyUpdate,
     TenantCreate,
     TenantRead,
     TenantUpdate,
     UnitCreate,
     UnitRead,
     UnitUpdate,
     UserCreate,
     UserRead,
     UserUpdate,
)
from .exceptions import (
     IntegrityViolationError,
     NotFoundError,
     PreconditionFailedError,
     StoreError,
     TransientStoreError,
)
from .local_cache import LocalCache

logger = logging.getLogger(__name__)

STORE_READ_RETRIES = int(os.getenv("STORE_READ_RETRIES", "2"))
STORE_RETRY_BACKOFF = float(os.getenv("STORE_RETRY_BACKOFF", "0.1"))

# session.info keys
_BATCH_DEPTH = "store_batch_depth"
_CACHE = "local_cache"
_CACHE_OPS = "local_cache_ops"


@dataclass(frozen=True)
class Reference:
     """
     A reference field holding the id of a record in another collection.

     cached_field / source_attr name the display value copied from the target
     (e.g. property_name <- Property.name). A required reference blocks
     deleting its target; an optional one is cleared (plus clear_also).
     """
     field: str
     target: str
     cached_field: Optional[str] = None
     source_attr: Optional[str] = None
     required: bool = False
     clear_also: Tuple[Tuple[str, object], ...] = ()


def _property_ref(required=True):
     return Reference("property_id", "properties", "property_name", "name", required=required)


def _unit_ref(required=True):
     return Reference("unit_id", "units", "unit_number", "unit_number", required=required)


def _tenant_ref(required=True):
     return Reference("tenant_id", "tenants", "tenant_name", "name", required=required)


REFERENCES: Dict[str, Tuple[Reference, ...]] = {
     "properties": (),
     "units": (
          _property_ref(),
          # Losing the occupant makes the unit vacant again
          Reference("tenant_id", "tenants", "tenant_name", "name",
                    clear_also=(("status", UnitStatus.VACANT.value),)),
     ),
     "tenants": (_unit_ref(required=False), _property_ref(required=False)),
     "leases": (_tenant_ref(), _unit_ref(), _property_ref()),
     "payments": (_tenant_ref(), _unit_ref(), _property_ref()),
     "maintenance": (_property_ref(), _unit_ref(required=False), _tenant_ref(required=False)),
     "users": (),
     "activities": (Reference("property_id", "properties"),),
}


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

@contextmanager
def atomic_batch(session: Session):
     """
     Run the enclosed writes as one atomic batch.

     Nested batches join the outermost one, which flushes and commits. Any
     failure rolls the whole batch back and surfaces as a StoreError:
     a concurrent change to a touched row (StaleDataError) as
     PreconditionFailedError, a database constraint as IntegrityViolationError,
     an unreachable database as TransientStoreError.
     """
     depth = session.info.get(_BATCH_DEPTH, 0)
     session.info[_BATCH_DEPTH] = depth + 1
     outermost = depth == 0
     try:
          yield session
          session.flush()
          if outermost:
               session.commit()
     except StoreError:
          if outermost:
               session.rollback()
          raise
     except StaleDataError as e:
          if outermost:
               session.rollback()
          logger.info("Batch aborted by a concurrent change: %s", e)
          raise PreconditionFailedError("record was modified concurrently; re-read and try again") from e
     except IntegrityError as e:
          if outermost:
               session.rollback()
          raise IntegrityViolationError(f"write rejected by the database: {e.orig}") from e
     except OperationalError as e:
          if outermost:
               session.rollback()
          logger.warning("Primary store unavailable during write: %s", e)
          raise TransientStoreError("primary store is unavailable; nothing was changed") from e
     except Exception:
          if outermost:
               session.rollback()
          raise
     finally:
          session.info[_BATCH_DEPTH] = depth


def in_batch(session: Session) -> bool:
     return session.info.get(_BATCH_DEPTH, 0) > 0


# ---------------------------------------------------------------------------
# Local cache wiring
# ---------------------------------------------------------------------------

def attach_cache(session: Session, cache: LocalCache) -> None:
     """
     Mirror committed rows of this session into the local cache.

     Rows flushed (or read) during a transaction are staged and only written
     to the cache after the transaction commits; a rollback discards them.
     """
     already_attached = _CACHE in session.info
     session.info[_CACHE] = cache
     session.info.setdefault(_CACHE_OPS, {})
     if already_attached:
          return
     event.listen(session, "after_flush", _stage_flushed_rows)
     event.listen(session, "after_commit", _apply_staged)
     event.listen(session, "after_soft_rollback", _discard_staged)


def _stage(session: Session, collection: str, record_id: str, document: Optional[dict]) -> None:
     if _CACHE in session.info:
          session.info.setdefault(_CACHE_OPS, {})[(collection, record_id)] = document


def _stage_flushed_rows(session, flush_context):
     for row in list(session.new) + list(session.dirty):
          read_schema = READ_SCHEMAS.get(getattr(row, "__tablename__", None))
          if read_schema is not None:
               document = read_schema.model_validate(row).model_dump(mode="json")
               _stage(session, row.__tablename__, row.id, document)
     for row in session.deleted:
          if row.__tablename__ in READ_SCHEMAS:
               _stage(session, row.__tablename__, row.id, None)


def _apply_staged(session):
     operations = session.info.get(_CACHE_OPS)
     session.info[_CACHE_OPS] = {}
     if not operations:
          return
     try:
          session.info[_CACHE].apply(operations)
     except OSError as e:
          # The primary store already committed; a stale cache only matters during an outage
          logger.warning("Local cache update failed: %s", e)


def _discard_staged(session, previous_transaction):
     session.info[_CACHE_OPS] = {}


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------

class Repository:
     """Typed access to one collection."""
     collection: str = ""
     model = None
     read_schema: Type[BaseModel] = None
     create_schema: Type[BaseModel] = None
     update_schema: Optional[Type[BaseModel]] = None
     # (field, descending) pairs, applied in order
     order_by: Tuple[Tuple[str, bool], ...] = ()

     def __init__(self, store: "EntityStore"):
          self.store = store

     @property
     def session(self) -> Session:
          return self.store.session

     @property
     def references(self) -> Tuple[Reference, ...]:
          return REFERENCES[self.collection]

     @property
     def scope_field(self) -> str:
          return getattr(self.read_schema, "scope_key", "property_id")

     # ----------------------------------------------------------------------
     # Reads
     # ----------------------------------------------------------------------

     def get_by_id(self, record_id: str) -> Optional[BaseModel]:
          records = self._select({"id": record_id})
          return records[0] if records else None

     def require(self, record_id: str) -> BaseModel:
          record = self.get_by_id(record_id)
          if record is None:
               raise NotFoundError(self.collection, record_id)
          return record

     def get_all(self) -> List[BaseModel]:
          return self._select({})

     def get_by_field(self, field: str, value) -> List[BaseModel]:
          return self._select({field: value})

     def get_by_property_id(self, property_id: str) -> List[BaseModel]:
          return self.get_by_field(self.scope_field, property_id)

     def get_by_unit_id(self, unit_id: str) -> List[BaseModel]:
          return self.get_by_field("unit_id", unit_id)

     def get_by_tenant_id(self, tenant_id: str) -> List[BaseModel]:
          return self.get_by_field("tenant_id", tenant_id)

     def get_by_property_ids(self, property_ids: Iterable[str]) -> List[BaseModel]:
          property_ids = list(property_ids)
          if not property_ids:
               return []
          return self._select({self.scope_field: property_ids})

     def _select(self, criteria: dict) -> List[BaseModel]:
          def from_primary():
               query = self.session.query(self.model)
               for field, value in criteria.items():
                    column = getattr(self.model, field)
                    if isinstance(value, (list, tuple, set, frozenset)):
                         query = query.filter(column.in_(list(value)))
                    else:
                         query = query.filter(column == value)
               for field, descending in self.order_by:
                    column = getattr(self.model, field)
                    query = query.order_by(column.desc() if descending else column.asc())
               return [self._to_read(row) for row in query.all()]

          def from_cache(cache: LocalCache):
               records = [
                    self.read_schema.model_validate(document)
                    for document in cache.all(self.collection)
                    if _matches(document, criteria)
               ]
               return self._sort(records)

          return self._read(from_primary, from_cache)

     def _read(self, from_primary: Callable, from_cache: Callable):
          """
          Read from the primary store, retrying transient failures with
          exponential backoff, then fall back to the local cache.

          Inside a write batch there is no retry or fallback: the batch fails.
          """
          if in_batch(self.session):
               try:
                    return from_primary()
               except OperationalError as e:
                    raise TransientStoreError(f"{self.collection} is unavailable") from e

          attempts = self.store.read_retries + 1
          last_error = None
          for attempt in range(attempts):
               try:
                    return from_primary()
               except OperationalError as e:
                    last_error = e
                    self.session.rollback()
                    if attempt + 1 < attempts:
                         delay = self.store.retry_backoff * (2 ** attempt)
                         logger.warning(
                              "Reading %s failed (attempt %d of %d), retrying in %.2fs: %s",
                              self.collection, attempt + 1, attempts, delay, e,
                         )
                         time.sleep(delay)

          cache = self.store.cache
          if cache is None:
               raise TransientStoreError(f"{self.collection} is unavailable") from last_error
          logger.warning("Primary store unavailable, serving %s from the local cache", self.collection)
          return from_cache(cache)

     def _to_read(self, row) -> BaseModel:
          record = self.read_schema.model_validate(row)
          _stage(self.session, self.collection, record.id, record.model_dump(mode="json"))
          return record

     def _sort(self, records: List[BaseModel]) -> List[BaseModel]:
          for field, descending in reversed(self.order_by):
               records.sort(key=lambda r: _sort_key(getattr(r, field)), reverse=descending)
          return records

     # ----------------------------------------------------------------------
     # Writes
     # ----------------------------------------------------------------------

     def create(self, data) -> str:
          """
          Validate data against the creatable field set and insert it.

          Returns:
               The new record's id

          Raises:
               IntegrityViolationError: If a reference field points at a missing record
          """
          payload = coerce_payload(self.create_schema, data)
          with atomic_batch(self.session):
               row = self.insert(payload.model_dump())
          return row.id

     def update(self, record_id: str, data) -> None:
          """
          Partially update a record with the fields explicitly set in data.

          Raises:
               NotFoundError: If the record does not exist
          """
          if self.update_schema is None:
               raise PreconditionFailedError(f"{self.collection} records cannot be updated")
          payload = coerce_payload(self.update_schema, data)
          with atomic_batch(self.session):
               row = self.get_row(record_id, required=True)
               self.apply(row, payload.model_dump(exclude_unset=True))

     def delete(self, record_id: str) -> None:
          """
          Delete a record.

          Raises:
               NotFoundError: If the record does not exist
               PreconditionFailedError: If another record still requires it
          """
          with atomic_batch(self.session):
               row = self.get_row(record_id, required=True)
               self.remove(row)

     def get_row(self, record_id: str, required: bool = False):
          """Load the ORM row for a write; use inside a batch."""
          row = self.session.get(self.model, record_id) if record_id is not None else None
          if row is None and required:
               raise NotFoundError(self.collection, record_id)
          return row

     def insert(self, values: dict):
          """Insert a row inside the current batch."""
          # Unset optional fields take the column defaults
          values = {field: value for field, value in values.items() if value is not None}
          self._resolve_references(values)
          row = self.model(**values)
          if row.id is None:
               row.id = new_id()
          now = self.store.now()
          row.created_at = now
          row.updated_at = now
          self._validate_row(row, values, created=True)
          self.session.add(row)
          self.session.flush()
          self._after_create(row)
          return row

     def apply(self, row, changes: dict) -> bool:
          """
          Write changes onto a loaded row inside the current batch.

          Fields whose value is unchanged are dropped; when nothing is left the
          row is not written and updated_at stays as it was.

          Returns:
               True if the row was written
          """
          changes = {field: value for field, value in changes.items() if getattr(row, field) != value}
          if not changes:
               return False
          self._resolve_references(changes)
          for field, value in changes.items():
               setattr(row, field, value)
          self._validate_row(row, changes, created=False)
          self._touch(row)
          self.session.flush()
          self._propagate_names(row, changes)
          return True

     def remove(self, row) -> None:
          """Delete a row inside the current batch, clearing optional references to it."""
          for collection, ref in self.store.inbound_references(self.collection):
               repository = self.store.repo(collection)
               column = getattr(repository.model, ref.field)
               dependents = self.session.query(repository.model).filter(column == row.id).all()
               if not dependents:
                    continue
               if ref.required:
                    raise PreconditionFailedError(
                         f"{self.collection} record {row.id} is still referenced by "
                         f"{len(dependents)} {collection} record(s)"
                    )
               cleared = {ref.field: None}
               cleared.update(dict(ref.clear_also))
               for dependent in dependents:
                    repository.apply(dependent, cleared)
          self._before_delete(row)
          self.session.delete(row)
          self.session.flush()
          self._after_delete(row)

     def _touch(self, row) -> None:
          now = self.store.now()
          previous = row.updated_at
          if previous is not None and now <= previous:
               now = previous + timedelta(microseconds=1)
          row.updated_at = now

     def _resolve_references(self, values: dict) -> None:
          for ref in self.references:
               if ref.field not in values:
                    continue
               target_id = values[ref.field]
               if target_id is None:
                    if ref.cached_field:
                         values[ref.cached_field] = None
                    continue
               target = self.store.repo(ref.target).get_row(target_id)
               if target is None:
                    raise IntegrityViolationError(
                         f"{self.collection}.{ref.field} references missing {ref.target} record {target_id}"
                    )
               if ref.cached_field:
                    values[ref.cached_field] = getattr(target, ref.source_attr)

     def _propagate_names(self, row, changes: dict) -> None:
          for collection, ref in self.store.inbound_references(self.collection):
               if not ref.cached_field or ref.source_attr not in changes:
                    continue
               repository = self.store.repo(collection)
               column = getattr(repository.model, ref.field)
               for dependent in self.session.query(repository.model).filter(column == row.id).all():
                    repository.apply(dependent, {ref.cached_field: changes[ref.source_attr]})

     def _check_unit_in_property(self, row) -> None:
          unit_id = getattr(row, "unit_id", None)
          if unit_id is None:
               return
          unit = self.store.units.get_row(unit_id)
          if unit is not None and unit.property_id != row.property_id:
               raise IntegrityViolationError(
                    f"unit {unit_id} does not belong to property {row.property_id}"
               )

     def _check_tenant_in_property(self, row, changes: dict, created: bool) -> None:
          tenant_id = getattr(row, "tenant_id", None)
          if tenant_id is None:
               return
          # Tenants move between properties; only a new or re-pointed record is checked
          if not created and "tenant_id" not in changes and "property_id" not in changes:
               return
          tenant = self.store.tenants.get_row(tenant_id)
          if tenant is not None and tenant.property_id != row.property_id:
               raise IntegrityViolationError(
                    f"tenant {tenant_id} is not registered at property {row.property_id}"
               )

     # Hooks for collection-specific rules
     def _validate_row(self, row, changes: dict, created: bool) -> None:
          pass

     def _after_create(self, row) -> None:
          pass

     def _before_delete(self, row) -> None:
          pass

     def _after_delete(self, row) -> None:
          pass


class PropertyRepository(Repository):
     collection = "properties"
     model = Property
     read_schema = PropertyRead
     create_schema = PropertyCreate
     update_schema = PropertyUpdate
     order_by = (("name", False),)

     def get_by_manager_id(self, manager_id: str) -> List[PropertyRead]:
          return self.get_by_field("manager_id", manager_id)

     def _before_delete(self, row) -> None:
          # A deleted property must disappear from every admin's allowed set
          for user in self.session.query(User).all():
               property_ids = list(user.property_ids or [])
               if row.id in property_ids:
                    self.store.users.apply(user, {"property_ids": [p for p in property_ids if p != row.id]})


class UnitRepository(Repository):
     collection = "units"
     model = Unit
     read_schema = UnitRead
     create_schema = UnitCreate
     update_schema = UnitUpdate
     order_by = (("property_name", False), ("unit_number", False))

     def get_available_units(self, property_id: Optional[str] = None) -> List[UnitRead]:
          criteria = {"status": UnitStatus.VACANT.value}
          if property_id is not None:
               criteria["property_id"] = property_id
          return self._select(criteria)

     def _after_create(self, row) -> None:
          self._adjust_unit_count(row.property_id, 1)

     def _after_delete(self, row) -> None:
          self._adjust_unit_count(row.property_id, -1)

     def _adjust_unit_count(self, property_id: str, delta: int) -> None:
          prop = self.store.properties.get_row(property_id)
          if prop is not None:
               self.store.properties.apply(prop, {"total_units": max(0, (prop.total_units or 0) + delta)})


class TenantRepository(Repository):
     collection = "tenants"
     model = Tenant
     read_schema = TenantRead
     create_schema = TenantCreate
     update_schema = TenantUpdate
     order_by = (("name", False),)

     def _validate_row(self, row, changes: dict, created: bool) -> None:
          if created and row.unit_id is not None:
               raise PreconditionFailedError(
                    "tenants are placed in units through the occupancy coordinator"
               )


class LeaseRepository(Repository):
     collection = "leases"
     model = Lease
     read_schema = LeaseRead
     create_schema = LeaseCreate
     update_schema = LeaseUpdate
     order_by = (("created_at", True),)

     def _validate_row(self, row, changes: dict, created: bool) -> None:
          self._check_unit_in_property(row)


class PaymentRepository(Repository):
     collection = "payments"
     model = Payment
     read_schema = PaymentRead
     create_schema = PaymentCreate
     update_schema = PaymentUpdate
     order_by = (("due_date", True),)

     def _validate_row(self, row, changes: dict, created: bool) -> None:
          self._check_unit_in_property(row)
          self._check_tenant_in_property(row, changes, created)
          now = self.store.now()
          if row.status == PaymentStatus.PAID.value and row.paid_date is None:
               row.paid_date = now
          if row.status == PaymentStatus.OVERDUE.value:
               if row.paid_date is not None:
                    raise PreconditionFailedError("an overdue payment cannot have a paid date")
               if row.due_date >= now:
                    raise PreconditionFailedError("a payment cannot be overdue before its due date")


class MaintenanceRepository(Repository):
     collection = "maintenance"
     model = Maintenance
     read_schema = MaintenanceRead
     create_schema = MaintenanceCreate
     update_schema = MaintenanceUpdate
     order_by = (("created_at", True),)

     def _validate_row(self, row, changes: dict, created: bool) -> None:
          self._check_unit_in_property(row)
          self._check_tenant_in_property(row, changes, created)
          if created and row.reported_date is None:
               row.reported_date = self.store.now()
          if row.status == MaintenanceStatus.COMPLETED.value and row.completed_at is None:
               row.completed_at = self.store.now()


class UserRepository(Repository):
     collection = "users"
     model = User
     read_schema = UserRead
     create_schema = UserCreate
     update_schema = UserUpdate
     order_by = (("name", False),)

     def _validate_row(self, row, changes: dict, created: bool) -> None:
          for property_id in changes.get("property_ids") or []:
               if self.store.properties.get_row(property_id) is None:
                    raise IntegrityViolationError(f"users.property_ids references missing properties record {property_id}")


class ActivityRepository(Repository):
     """Append-only: activities are created and read, never updated."""
     collection = "activities"
     model = Activity
     read_schema = ActivityRead
     create_schema = ActivityCreate
     update_schema = None
     order_by = (("created_at", True),)


REPOSITORY_CLASSES = (
     PropertyRepository,
     UnitRepository,
     TenantRepository,
     LeaseRepository,
     PaymentRepository,
     MaintenanceRepository,
     UserRepository,
     ActivityRepository,
)

READ_SCHEMAS: Dict[str, Type[BaseModel]] = {cls.collection: cls.read_schema for cls in REPOSITORY_CLASSES}


class EntityStore:
     """
     The repositories of every collection over one database session.

     Args:
          session: SQLAlchemy session (one per request)
          cache: Optional local cache tier
          clock: Callable returning the current naive-UTC time
     """

     def __init__(
          self,
          session: Session,
          cache: Optional[LocalCache] = None,
          clock: Callable = utcnow,
          read_retries: int = STORE_READ_RETRIES,
          retry_backoff: float = STORE_RETRY_BACKOFF,
     ):
          self.session = session
          self.cache = cache
          self.clock = clock
          self.read_retries = read_retries
          self.retry_backoff = retry_backoff
          if cache is not None:
               attach_cache(session, cache)

          self.properties = PropertyRepository(self)
          self.units = UnitRepository(self)
          self.tenants = TenantRepository(self)
          self.leases = LeaseRepository(self)
          self.payments = PaymentRepository(self)
          self.maintenance = MaintenanceRepository(self)
          self.users = UserRepository(self)
          self.activities = ActivityRepository(self)
          self._repositories = {
               repository.collection: repository
               for repository in (
                    self.properties, self.units, self.tenants, self.leases,
                    self.payments, self.maintenance, self.users, self.activities,
               )
          }

     def repo(self, collection: str) -> Repository:
          return self._repositories[collection]

     def now(self):
          return self.clock()

     def batch(self):
          return atomic_batch(self.session)

     def inbound_references(self, collection: str) -> List[Tuple[str, Reference]]:
          """Every (collection, reference) pair that points at the given collection."""
          return [
               (source, ref)
               for source, refs in REFERENCES.items()
               for ref in refs
               if ref.target == collection
          ]


def coerce_payload(schema: Type[BaseModel], data) -> BaseModel:
     if isinstance(data, schema):
          return data
     if isinstance(data, BaseModel):
          data = data.model_dump(exclude_unset=True)
     return schema.model_validate(data)


def _matches(document: dict, criteria: dict) -> bool:
     for field, value in criteria.items():
          if isinstance(value, (list, tuple, set, frozenset)):
               if document.get(field) not in value:
                    return False
          elif document.get(field) != value:
               return False
     return True


def _sort_key(value):
     return (value is None, value if value is not None else 0)
