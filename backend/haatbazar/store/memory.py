"""
haatbazar/store/memory.py - In-process document store.

Same contract as the Firestore backend, kept in dicts behind one lock. Used for local
development (`STORE_BACKEND=memory`) and by the test-suite. Documents are deep-copied in
and out so callers never share state with the store.
"""
import copy
import threading
import uuid
from typing import Dict, Iterator, List, Optional, Sequence

from haatbazar.core.errors import NotFound
from haatbazar.store.base import Document, DocumentStore, Filter, Mutation, matches, sort_key


class MemoryStore(DocumentStore):
    def __init__(self, prefix: str = "", timeout: float = 5.0):
        super().__init__(prefix=prefix, timeout=timeout)
        self._lock = threading.RLock()
        self._data: Dict[str, Dict[str, Document]] = {}

    def _open(self) -> None:
        pass

    def _close(self) -> None:
        pass

    def _col(self, collection: str) -> Dict[str, Document]:
        return self._data.setdefault(self.collection_name(collection), {})

    @staticmethod
    def _out(doc_id: str, doc: Document) -> Document:
        out = copy.deepcopy(doc)
        out["id"] = doc_id
        return out

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with self._lock:
            doc = self._col(collection).get(doc_id)
            return self._out(doc_id, doc) if doc is not None else None

    def find(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        with self._lock:
            rows = [self._out(k, v) for k, v in self._col(collection).items() if matches(v, filters)]
        if order_by:
            rows.sort(key=sort_key(order_by), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return rows

    def scan(self, collection: str, filters: Sequence[Filter] = ()) -> Iterator[Document]:
        with self._lock:
            snapshot = list(self._col(collection).items())
        for doc_id, doc in snapshot:
            if matches(doc, filters):
                yield self._out(doc_id, doc)

    def insert(self, collection: str, data: Document, doc_id: Optional[str] = None) -> Document:
        doc_id = doc_id or uuid.uuid4().hex
        payload = {k: v for k, v in copy.deepcopy(data).items() if k != "id"}
        with self._lock:
            self._col(collection)[doc_id] = payload
            return self._out(doc_id, payload)

    def update_one(
        self,
        collection: str,
        doc_id: str,
        mutate: Mutation,
        upsert: bool = True,
    ) -> Optional[Document]:
        with self._lock:
            col = self._col(collection)
            current = col.get(doc_id)
            if current is None and not upsert:
                return None
            new = mutate(copy.deepcopy(current) if current is not None else None)
            payload = {k: v for k, v in copy.deepcopy(new).items() if k != "id"}
            col[doc_id] = payload
            return self._out(doc_id, payload)

    def set_fields(self, collection: str, doc_id: str, fields: Document) -> Document:
        with self._lock:
            col = self._col(collection)
            if doc_id not in col:
                raise NotFound()
            col[doc_id].update(copy.deepcopy(fields))
            return self._out(doc_id, col[doc_id])

    def delete(self, collection: str, doc_id: str) -> bool:
        with self._lock:
            return self._col(collection).pop(doc_id, None) is not None
