"""
haatbazar/store/base.py - Persistence gateway contract.

Every repository talks to the document store through `DocumentStore`. A document is a
plain dict; the store adds its identifier under the "id" key when returning it.

Filters are `(field, op, value)` tuples, mirroring Firestore's `FieldFilter`. Supported
ops: "==", "!=", "in", "array_contains".

`update_one` is the only read-modify-write primitive: the `mutate` callable receives the
current document (or None) and returns the document to store. Implementations must run
the read and the write as one atomic step for that document.
"""
import abc
import threading
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

Document = Dict[str, Any]
Filter = Tuple[str, str, Any]
Mutation = Callable[[Optional[Document]], Document]


class DocumentStore(abc.ABC):
    """Base gateway. Subclasses implement `_open`/`_close` and the data primitives."""

    def __init__(self, prefix: str = "", timeout: float = 5.0):
        self.prefix = prefix or ""
        self.timeout = timeout
        self._connect_lock = threading.Lock()
        self._connected = False

    def collection_name(self, name: str) -> str:
        return f"{self.prefix}{name}" if self.prefix else name

    # ---------- lifecycle ----------
    def connect(self) -> "DocumentStore":
        """Open the backend once; concurrent first callers wait on the same attempt."""
        if self._connected:
            return self
        with self._connect_lock:
            if not self._connected:
                self._open()
                self._connected = True
        return self

    def close(self) -> None:
        with self._connect_lock:
            if self._connected:
                self._close()
                self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    @abc.abstractmethod
    def _open(self) -> None: ...

    @abc.abstractmethod
    def _close(self) -> None: ...

    # ---------- reads ----------
    @abc.abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Document]: ...

    def find_one(self, collection: str, filters: Sequence[Filter]) -> Optional[Document]:
        rows = self.find(collection, filters, limit=1)
        return rows[0] if rows else None

    @abc.abstractmethod
    def find(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]: ...

    @abc.abstractmethod
    def scan(self, collection: str, filters: Sequence[Filter] = ()) -> Iterator[Document]: ...

    # ---------- writes ----------
    @abc.abstractmethod
    def insert(self, collection: str, data: Document, doc_id: Optional[str] = None) -> Document: ...

    @abc.abstractmethod
    def update_one(
        self,
        collection: str,
        doc_id: str,
        mutate: Mutation,
        upsert: bool = True,
    ) -> Optional[Document]: ...

    @abc.abstractmethod
    def set_fields(self, collection: str, doc_id: str, fields: Document) -> Document: ...

    @abc.abstractmethod
    def delete(self, collection: str, doc_id: str) -> bool: ...


def matches(doc: Document, filters: Sequence[Filter]) -> bool:
    for field, op, value in filters:
        current = doc.get(field)
        if op == "==":
            ok = current == value
        elif op == "!=":
            ok = current != value
        elif op == "in":
            ok = current in value
        elif op == "array_contains":
            ok = isinstance(current, list) and value in current
        else:
            raise ValueError(f"Unsupported filter op: {op}")
        if not ok:
            return False
    return True


def sort_key(field: str):
    """Sort key that tolerates missing values (they sort first)."""
    def _key(doc: Document):
        value = doc.get(field)
        return (value is not None, value if value is not None else 0)
    return _key
