"""
Document Store - In-memory key-value records behind db:// resources

Module: capabilities.document_store
Date: 2025-12-02
Version: 1.0.0

CHANGELOG:
[2025-12-02 v1.0.0] Initial implementation
  - Records keyed by (collection, id)
  - Demo seed data

ARCHITECTURE:
DocumentStore is an explicit object handed to the db:// resource producer
when the built-in capabilities are registered. It is mutated only before
the server starts; reads during serving need no lock.
"""

import copy
import logging
from typing import Any, Dict, List, Optional, Tuple

from ..core.errors import NotFoundError

SEED_RECORDS = {
    ("users", "1"): {"id": 1, "name": "John Doe", "email": "john@example.com"},
    ("users", "2"): {"id": 2, "name": "Jane Smith", "email": "jane@example.com"},
    ("products", "1"): {"id": 1, "name": "Product 1", "price": 99.99},
    ("products", "2"): {"id": 2, "name": "Product 2", "price": 149.99},
}


class DocumentStore:
    """
    Records grouped in collections

    Typical usage:
        store = DocumentStore.seeded()
        store.get("users", "1")   # {"id": 1, "name": "John Doe", ...}
    """

    def __init__(self, records: Optional[Dict[tuple, Dict[str, Any]]] = None):
        self.logger = logging.getLogger("capabilities.document_store")
        self._records: Dict[Tuple[str, str], Dict[str, Any]] = {}
        for (collection, record_id), record in (records or {}).items():
            self.put(collection, record_id, record)

    @classmethod
    def seeded(cls) -> "DocumentStore":
        """Store holding the demo users and products"""
        return cls(SEED_RECORDS)

    @staticmethod
    def key(collection: str, record_id: Any) -> Tuple[str, str]:
        return (collection, str(record_id))

    def get(self, collection: str, record_id: str) -> Dict[str, Any]:
        """
        Fetch one record

        Raises:
            NotFoundError: If no record has this key
        """
        record = self._records.get(self.key(collection, record_id))
        if record is None:
            raise NotFoundError(f"Resource not found: {collection}:{record_id}")
        return copy.deepcopy(record)

    def put(self, collection: str, record_id: str, record: Dict[str, Any]) -> None:
        self._records[self.key(collection, record_id)] = copy.deepcopy(record)

    def delete(self, collection: str, record_id: str) -> bool:
        return self._records.pop(self.key(collection, record_id), None) is not None

    def keys(self) -> List[Tuple[str, str]]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)
