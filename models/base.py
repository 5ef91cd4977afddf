# models/base.py
import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


def new_id() -> str:
     """Document ids are opaque strings, like the ones the document store hands out."""
     return uuid.uuid4().hex


def utcnow() -> datetime:
     """Naive UTC timestamp, the representation stored in every DateTime column."""
     return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
     """
     Base class for all SQLAlchemy models.

     Every model declares its own __tablename__ (the collection name) and the
     id / created_at / updated_at / version columns the store relies on.
     """
     pass
