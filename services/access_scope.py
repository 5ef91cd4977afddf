# services/access_scope.py
"""
Access Scope Filter - what each user is allowed to see and touch.

- super_admin: every record
- admin: records whose property is in the user's property_ids
- no user, or any other role: nothing

Records may be read models, ORM rows or plain dicts. A Property is scoped by
its own id; everything else by its property_id.
"""
from typing import Iterable, List, Optional

from models.user import UserRole
from .exceptions import ScopeViolationError


def _get(obj, name, default=None):
     if obj is None:
          return default
     if isinstance(obj, dict):
          return obj.get(name, default)
     return getattr(obj, name, default)


def _role(user) -> Optional[str]:
     role = _get(user, "role")
     return getattr(role, "value", role)


def _scope_key(record, key: Optional[str]) -> str:
     if key is not None:
          return key
     return getattr(type(record), "scope_key", "property_id")


def scope(records: Iterable, user, key: Optional[str] = None) -> List:
     """
     Filter records down to the ones the user may see.

     Never mutates its input and never raises. A missing user or an unknown
     role gives an empty list.

     Args:
          records: Records of one collection
          user: The acting user (role + property_ids), or None
          key: Field holding the property id; defaults to the record type's scope key

     Returns:
          A new list
     """
     if user is None or records is None:
          return []
     role = _role(user)
     if role == UserRole.SUPER_ADMIN.value:
          return list(records)
     if role == UserRole.ADMIN.value:
          allowed = set(_get(user, "property_ids") or [])
          return [r for r in records if _get(r, _scope_key(r, key)) in allowed]
     return []


def accessible_property_ids(user) -> Optional[List[str]]:
     """
     Property ids the user may access.

     Returns:
          None when unrestricted (super_admin), otherwise a list (possibly empty)
     """
     role = _role(user)
     if role == UserRole.SUPER_ADMIN.value:
          return None
     if role == UserRole.ADMIN.value:
          return list(_get(user, "property_ids") or [])
     return []


def can_access_property(user, property_id: Optional[str]) -> bool:
     allowed = accessible_property_ids(user)
     if allowed is None:
          return True
     return property_id is not None and property_id in allowed


def ensure_property_access(user, property_id: Optional[str]) -> None:
     """
     Raise ScopeViolationError unless the user may act on records of property_id.
     Used to scope writes.
     """
     if not can_access_property(user, property_id):
          raise ScopeViolationError(f"no access to property {property_id}")


def can_manage_users(user) -> bool:
     """Only super admins may create, edit or delete user records."""
     return _role(user) == UserRole.SUPER_ADMIN.value
