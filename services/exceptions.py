# services/exceptions.py
"""
Error taxonomy for the entity store and the services built on it.

Each error carries the HTTP status the API answers with; the handlers in
main.py translate them into JSON {"detail": ...} responses.
"""
from fastapi import status


class StoreError(Exception):
     """Base class for every error raised by the store and its services."""
     status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

     def __init__(self, message: str):
          super().__init__(message)
          self.message = message


class NotFoundError(StoreError):
     """A referenced record does not exist."""
     status_code = status.HTTP_404_NOT_FOUND

     def __init__(self, collection: str, record_id: str):
          super().__init__(f"{collection} record {record_id} not found")
          self.collection = collection
          self.record_id = record_id


class PreconditionFailedError(StoreError):
     """
     The operation is not allowed in the current state, or a record it touched
     was changed concurrently (optimistic version check failed).
     """
     status_code = status.HTTP_409_CONFLICT


class IntegrityViolationError(StoreError):
     """A write would leave a reference pointing at a missing record."""
     status_code = 422  # Unprocessable Content


class ScopeViolationError(StoreError):
     """The acting user may not touch records of this property."""
     status_code = status.HTTP_403_FORBIDDEN


class TransientStoreError(StoreError):
     """The primary store is unreachable; nothing was changed."""
     status_code = status.HTTP_503_SERVICE_UNAVAILABLE
