# services/integrity.py
"""
Integrity audit.

Writes are checked by the store, but rows written before those checks (or by
hand) can still disagree. find_integrity_issues reports every reference that
does not resolve, every unit/tenant pair whose occupancy does not agree,
every drifted total_units cache and every overdue payment that breaks the
overdue rule. Nothing is repaired except through recount_units.
"""
import logging
from collections import Counter
from typing import List

from models import PaymentStatus, UnitStatus
from schemas import IntegrityIssue
from .store import REFERENCES, EntityStore

logger = logging.getLogger(__name__)


def find_integrity_issues(store: EntityStore) -> List[IntegrityIssue]:
     records = {collection: store.repo(collection).get_all() for collection in REFERENCES}
     ids = {collection: {r.id for r in rows} for collection, rows in records.items()}
     issues: List[IntegrityIssue] = []

     # Dangling references
     for collection, refs in REFERENCES.items():
          for ref in refs:
               for record in records[collection]:
                    target_id = getattr(record, ref.field)
                    if target_id is not None and target_id not in ids[ref.target]:
                         issues.append(IntegrityIssue(
                              collection=collection,
                              record_id=record.id,
                              kind="dangling_reference",
                              field=ref.field,
                              detail=f"{ref.field} points at missing {ref.target} record {target_id}",
                         ))
     for user in records["users"]:
          for property_id in user.property_ids:
               if property_id not in ids["properties"]:
                    issues.append(IntegrityIssue(
                         collection="users",
                         record_id=user.id,
                         kind="dangling_reference",
                         field="property_ids",
                         detail=f"property_ids contains missing properties record {property_id}",
                    ))

     # Occupancy, in both directions
     units = {u.id: u for u in records["units"]}
     tenants = {t.id: t for t in records["tenants"]}
     for unit in units.values():
          occupant = tenants.get(unit.tenant_id) if unit.tenant_id else None
          if unit.status == UnitStatus.OCCUPIED:
               if occupant is None or occupant.unit_id != unit.id:
                    issues.append(IntegrityIssue(
                         collection="units",
                         record_id=unit.id,
                         kind="occupancy_mismatch",
                         field="tenant_id",
                         detail=f"unit is occupied but tenant {unit.tenant_id} does not point back at it",
                    ))
          elif unit.tenant_id is not None:
               issues.append(IntegrityIssue(
                    collection="units",
                    record_id=unit.id,
                    kind="occupancy_mismatch",
                    field="status",
                    detail=f"unit is {unit.status.value} but still names tenant {unit.tenant_id}",
               ))
     for tenant in tenants.values():
          if tenant.unit_id is None or tenant.unit_id not in units:
               continue
          unit = units[tenant.unit_id]
          if unit.status != UnitStatus.OCCUPIED or unit.tenant_id != tenant.id:
               issues.append(IntegrityIssue(
                    collection="tenants",
                    record_id=tenant.id,
                    kind="occupancy_mismatch",
                    field="unit_id",
                    detail=f"tenant points at unit {unit.id} which is {unit.status.value} for tenant {unit.tenant_id}",
               ))

     # total_units cache
     unit_counts = Counter(u.property_id for u in records["units"])
     for prop in records["properties"]:
          if prop.total_units != unit_counts.get(prop.id, 0):
               issues.append(IntegrityIssue(
                    collection="properties",
                    record_id=prop.id,
                    kind="unit_count_drift",
                    field="total_units",
                    detail=f"total_units is {prop.total_units} but {unit_counts.get(prop.id, 0)} units exist",
               ))

     now = store.now()
     for payment in records["payments"]:
          if payment.status == PaymentStatus.OVERDUE and (payment.paid_date is not None or payment.due_date >= now):
               issues.append(IntegrityIssue(
                    collection="payments",
                    record_id=payment.id,
                    kind="invalid_overdue",
                    field="status",
                    detail="overdue payment has a paid date or is not yet due",
               ))

     if issues:
          logger.warning("Integrity audit found %d issue(s)", len(issues))
     return issues


def recount_units(store: EntityStore, property_id: str) -> int:
     """
     Repair a property's total_units cache from the actual unit count.

     Returns:
          The corrected count
     """
     with store.batch():
          prop = store.properties.get_row(property_id, required=True)
          count = len(store.units.get_by_property_id(property_id))
          store.properties.apply(prop, {"total_units": count})
     return count
