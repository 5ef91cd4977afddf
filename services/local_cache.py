# services/local_cache.py
"""
Local cache tier of the entity store.

One JSON document per collection on local disk ({prefix}{collection}.json),
holding the last committed copy of every record the service wrote or read.
The store serves reads from here when the primary database is unreachable.
"""
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "bottaye_"


class LocalCache:
     """File-backed JSON mirror of the store's collections."""

     def __init__(self, directory, prefix: str = DEFAULT_PREFIX):
          self.directory = Path(directory)
          self.directory.mkdir(parents=True, exist_ok=True)
          self.prefix = prefix
          self._lock = threading.RLock()

     def _path(self, collection: str) -> Path:
          return self.directory / f"{self.prefix}{collection}.json"

     def _load(self, collection: str) -> Dict[str, dict]:
          path = self._path(collection)
          if not path.exists():
               return {}
          try:
               with path.open("r", encoding="utf-8") as fh:
                    return json.load(fh)
          except (OSError, ValueError) as e:
               logger.warning("Local cache file %s is unreadable, starting empty: %s", path, e)
               return {}

     def _save(self, collection: str, documents: Dict[str, dict]) -> None:
          # Write to a temp file first so a crash never leaves a half-written cache
          fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{collection}.", suffix=".tmp")
          try:
               with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(documents, fh)
               os.replace(tmp_path, self._path(collection))
          except OSError:
               if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
               raise

     def get(self, collection: str, record_id: str) -> Optional[dict]:
          with self._lock:
               return self._load(collection).get(record_id)

     def all(self, collection: str) -> List[dict]:
          with self._lock:
               return list(self._load(collection).values())

     def put(self, collection: str, document: dict) -> None:
          self.put_many(collection, [document])

     def put_many(self, collection: str, documents: Iterable[dict]) -> None:
          with self._lock:
               current = self._load(collection)
               for document in documents:
                    current[document["id"]] = document
               self._save(collection, current)

     def remove(self, collection: str, record_id: str) -> None:
          with self._lock:
               current = self._load(collection)
               if current.pop(record_id, None) is not None:
                    self._save(collection, current)

     def apply(self, operations: Dict[tuple, Optional[dict]]) -> None:
          """
          Apply staged operations keyed by (collection, id): a document is
          written, None removes the record.
          """
          by_collection: Dict[str, Dict[str, Optional[dict]]] = {}
          for (collection, record_id), document in operations.items():
               by_collection.setdefault(collection, {})[record_id] = document
          with self._lock:
               for collection, changes in by_collection.items():
                    current = self._load(collection)
                    for record_id, document in changes.items():
                         if document is None:
                              current.pop(record_id, None)
                         else:
                              current[record_id] = document
                    self._save(collection, current)

     def clear(self, collection: Optional[str] = None) -> None:
          with self._lock:
               if collection is not None:
                    self._path(collection).unlink(missing_ok=True)
                    return
               for path in self.directory.glob(f"{self.prefix}*.json"):
                    path.unlink(missing_ok=True)
