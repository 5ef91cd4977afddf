# services/occupancy.py
"""
Occupancy Consistency Coordinator.

The only code allowed to change Unit.status, Unit.tenant_id and
Tenant.unit_id. Each public operation runs as one atomic batch, so a unit is
occupied exactly when a tenant points at it, and that tenant is the one the
unit points back at. A concurrent change to any touched row makes the batch
fail as PreconditionFailedError and nothing is written.
"""
import logging
from datetime import datetime
from typing import Optional

from models import Lease, LeaseStatus, Tenant, UnitStatus
from schemas import LeaseCreate, TenantCreate
from .exceptions import IntegrityViolationError, PreconditionFailedError
from .lease_lifecycle import LeaseLifecycle
from .store import EntityStore, coerce_payload

logger = logging.getLogger(__name__)


class OccupancyCoordinator:
     """Multi-record operations that keep units, tenants and leases consistent."""

     def __init__(self, store: EntityStore, lifecycle: Optional[LeaseLifecycle] = None):
          self.store = store
          self.lifecycle = lifecycle or LeaseLifecycle(clock=store.clock)

     @property
     def session(self):
          return self.store.session

     # ------------------------------------------------------------------
     # Assignment
     # ------------------------------------------------------------------

     def assign_tenant_to_unit(self, tenant_id: str, unit_id: str) -> None:
          """
          Place a tenant in a vacant unit.

          A tenant already living elsewhere has that unit released in the same
          batch. Assigning a tenant to the unit they already occupy is a no-op.

          Raises:
               NotFoundError: If the tenant or unit does not exist
               PreconditionFailedError: If the unit is occupied by someone else or under maintenance
          """
          with self.store.batch():
               tenant = self.store.tenants.get_row(tenant_id, required=True)
               unit = self.store.units.get_row(unit_id, required=True)
               self._assign(tenant, unit)

     def release_unit(self, unit_id: str) -> None:
          """
          Make a unit vacant and clear every tenant still pointing at it.

          Idempotent: an already vacant, unreferenced unit is not written. A unit
          under maintenance keeps its status.
          """
          with self.store.batch():
               unit = self.store.units.get_row(unit_id, required=True)
               self._release(unit)

     def _assign(self, tenant, unit) -> None:
          if (
               unit.status == UnitStatus.OCCUPIED.value
               and unit.tenant_id == tenant.id
               and tenant.unit_id == unit.id
          ):
               return
          if unit.status != UnitStatus.VACANT.value:
               logger.info("Refusing to assign tenant %s: unit %s is %s", tenant.id, unit.id, unit.status)
               raise PreconditionFailedError(f"unit {unit.unit_number} is {unit.status}, not vacant")

          if tenant.unit_id is not None and tenant.unit_id != unit.id:
               previous = self.store.units.get_row(tenant.unit_id)
               if previous is not None:
                    self._release(previous)

          # A vacant unit has no occupant; drop any stale pointer from another tenant
          for other in self._tenants_in(unit.id):
               if other.id != tenant.id:
                    self.store.tenants.apply(other, {"unit_id": None})

          self.store.units.apply(unit, {
               "status": UnitStatus.OCCUPIED.value,
               "tenant_id": tenant.id,
          })
          changes = {"unit_id": unit.id, "property_id": unit.property_id}
          if tenant.rent is None:
               changes["rent"] = unit.rent
          if tenant.deposit is None:
               changes["deposit"] = unit.deposit
          self.store.tenants.apply(tenant, changes)

     def _release(self, unit) -> bool:
          changed = False
          for tenant in self._tenants_in(unit.id):
               changed |= self.store.tenants.apply(tenant, {"unit_id": None})
          if unit.status == UnitStatus.MAINTENANCE.value:
               return changed
          changed |= self.store.units.apply(unit, {
               "status": UnitStatus.VACANT.value,
               "tenant_id": None,
          })
          return changed

     def _tenants_in(self, unit_id: str):
          return self.session.query(Tenant).filter(Tenant.unit_id == unit_id).all()

     # ------------------------------------------------------------------
     # Tenants
     # ------------------------------------------------------------------

     def create_tenant(self, data) -> str:
          """
          Create a tenant, and place them in data.unit_id (if given) in the same batch.

          Returns:
               The new tenant's id
          """
          payload = coerce_payload(TenantCreate, data)
          values = payload.model_dump()
          unit_id = values.pop("unit_id", None)
          with self.store.batch():
               unit = None
               if unit_id is not None:
                    unit = self.store.units.get_row(unit_id)
                    if unit is None:
                         raise IntegrityViolationError(f"tenants.unit_id references missing units record {unit_id}")
                    if values.get("property_id") not in (None, unit.property_id):
                         raise IntegrityViolationError(
                              f"unit {unit_id} does not belong to property {values['property_id']}"
                         )
               tenant = self.store.tenants.insert(values)
               if unit is not None:
                    self._assign(tenant, unit)
          return tenant.id

     def delete_tenant(self, tenant_id: str) -> None:
          """Release the tenant's unit and delete the tenant in one batch."""
          with self.store.batch():
               tenant = self.store.tenants.get_row(tenant_id, required=True)
               if tenant.unit_id is not None:
                    unit = self.store.units.get_row(tenant.unit_id)
                    if unit is not None:
                         self._release(unit)
               self.store.tenants.remove(tenant)

     # ------------------------------------------------------------------
     # Leases
     # ------------------------------------------------------------------

     def create_lease(self, data) -> str:
          """
          Create an active lease and make occupancy agree with it.

          A vacant unit is assigned to the lease's tenant in the same batch. Any
          earlier lease of the same tenant and unit that is still current is
          marked renewed. The tenant's cached lease dates and rent follow the
          new lease.

          Returns:
               The new lease's id

          Raises:
               IntegrityViolationError: If a party is missing or the unit is not in the property
               PreconditionFailedError: If the unit is under maintenance or occupied by another tenant
          """
          payload = coerce_payload(LeaseCreate, data)
          values = payload.model_dump()
          with self.store.batch():
               tenant = self._required_reference("tenants", values["tenant_id"])
               unit = self._required_reference("units", values["unit_id"])
               prop = self._required_reference("properties", values["property_id"])
               if unit.property_id != prop.id:
                    raise IntegrityViolationError(f"unit {unit.id} does not belong to property {prop.id}")
               if unit.status == UnitStatus.MAINTENANCE.value:
                    raise PreconditionFailedError(f"unit {unit.unit_number} is under maintenance")
               if unit.status == UnitStatus.OCCUPIED.value and unit.tenant_id != tenant.id:
                    raise PreconditionFailedError(f"unit {unit.unit_number} is occupied by another tenant")

               for previous in self._current_leases(tenant.id, unit.id):
                    self.store.leases.apply(previous, {"status": LeaseStatus.RENEWED.value})

               lease = self.store.leases.insert(values)
               if unit.status == UnitStatus.VACANT.value:
                    self._assign(tenant, unit)
               self.store.tenants.apply(tenant, {
                    "lease_start_date": lease.start_date,
                    "lease_end_date": lease.end_date,
                    "rent": lease.monthly_rent,
                    "deposit": lease.security_deposit,
               })
          return lease.id

     def renew_lease(self, lease_id: str, new_end_date: datetime, special_terms: Optional[str] = None) -> None:
          """
          Extend a lease: end_date moves, last_renewal_date is now and the lease is active again.

          Raises:
               PreconditionFailedError: If the lease is terminated or superseded, or new_end_date is not in the future
          """
          with self.store.batch():
               lease = self.store.leases.get_row(lease_id, required=True)
               changes = self.lifecycle.renewal_changes(lease, new_end_date, special_terms, now=self.store.now())
               self.store.leases.apply(lease, changes)
               tenant = self.store.tenants.get_row(lease.tenant_id)
               if tenant is not None and tenant.unit_id in (None, lease.unit_id):
                    self.store.tenants.apply(tenant, {"lease_end_date": lease.end_date})

     def terminate_lease(self, lease_id: str) -> None:
          """
          End a lease now.

          The unit is released only when this was the current lease of a tenant
          who still occupies it. Terminating a superseded lease leaves occupancy
          to the lease that replaced it.
          """
          with self.store.batch():
               lease = self.store.leases.get_row(lease_id, required=True)
               if lease.status == LeaseStatus.TERMINATED.value:
                    return
               was_current = lease.status != LeaseStatus.RENEWED.value and not self._current_leases(
                    lease.tenant_id, lease.unit_id, exclude=lease.id
               )
               self.store.leases.apply(lease, {
                    "status": LeaseStatus.TERMINATED.value,
                    "terminated_at": self.store.now(),
               })
               unit = self.store.units.get_row(lease.unit_id)
               if was_current and unit is not None and unit.tenant_id == lease.tenant_id:
                    self._release(unit)

     # ------------------------------------------------------------------
     # Maintenance state
     # ------------------------------------------------------------------

     def mark_unit_under_maintenance(self, unit_id: str) -> None:
          """Take a unit out of service, releasing its occupant first."""
          with self.store.batch():
               unit = self.store.units.get_row(unit_id, required=True)
               if unit.status == UnitStatus.MAINTENANCE.value:
                    return
               self._release(unit)
               self.store.units.apply(unit, {"status": UnitStatus.MAINTENANCE.value})

     def restore_unit(self, unit_id: str) -> None:
          """Bring a unit back from maintenance as vacant."""
          with self.store.batch():
               unit = self.store.units.get_row(unit_id, required=True)
               if unit.status == UnitStatus.VACANT.value:
                    return
               if unit.status != UnitStatus.MAINTENANCE.value:
                    raise PreconditionFailedError(f"unit {unit.unit_number} is {unit.status}, not under maintenance")
               self.store.units.apply(unit, {"status": UnitStatus.VACANT.value})

     def _current_leases(self, tenant_id: str, unit_id: str, exclude: Optional[str] = None):
          """Leases of the tenant and unit that have not been terminated or superseded."""
          query = self.session.query(Lease).filter(
               Lease.tenant_id == tenant_id,
               Lease.unit_id == unit_id,
               Lease.status.notin_([LeaseStatus.TERMINATED.value, LeaseStatus.RENEWED.value]),
          )
          if exclude is not None:
               query = query.filter(Lease.id != exclude)
          return query.all()

     def _required_reference(self, collection: str, record_id: str):
          row = self.store.repo(collection).get_row(record_id)
          if row is None:
               raise IntegrityViolationError(f"leases references missing {collection} record {record_id}")
          return row
