"""
haatbazar/store/firestore.py - Firestore backend for the persistence gateway.

Initializes a dedicated Firebase Admin app from the service-account credentials in
`Settings` (inline env credentials first, then the JSON file) and talks to Firestore
through the google-cloud-firestore client.

- Every call passes `timeout=self.timeout`; deadline / transport failures are re-raised
  as `PersistenceUnavailable`.
- `update_one` runs inside a Firestore transaction (optimistic concurrency: Firestore
  aborts the commit if the document changed after it was read). When the transaction
  cannot commit within `max_attempts` the gateway raises `ConcurrentModification`.
- Ordered queries need a composite index. When Firestore answers FailedPrecondition the
  query is re-run without `order_by` and sorted in Python.
"""
import contextlib
import logging
from typing import Iterator, List, Optional, Sequence

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core import exceptions as gexc
from google.auth import exceptions as auth_exc
from google.cloud import firestore as gcf
from google.cloud.firestore_v1 import FieldFilter

from haatbazar.config import Settings
from haatbazar.core.errors import AppError, ConcurrentModification, NotFound, PersistenceUnavailable
from haatbazar.store.base import Document, DocumentStore, Filter, Mutation, sort_key

logger = logging.getLogger("haatbazar.store")

_UNAVAILABLE = (
    gexc.DeadlineExceeded,
    gexc.ServiceUnavailable,
    gexc.RetryError,
    auth_exc.TransportError,
)

_FIREBASE_APP_NAME = "haatbazar"


@contextlib.contextmanager
def _translate_errors():
    try:
        yield
    except AppError:
        raise
    except _UNAVAILABLE as exc:
        raise PersistenceUnavailable() from exc
    except gexc.Aborted as exc:
        raise ConcurrentModification() from exc
    except ValueError as exc:
        # raised by the transactional wrapper once max_attempts is exhausted
        if "Failed to commit transaction" in str(exc):
            raise ConcurrentModification() from exc
        raise


class FirestoreStore(DocumentStore):
    def __init__(self, settings: Settings, client=None, max_attempts: int = 5):
        super().__init__(prefix=settings.collection_prefix, timeout=settings.store_timeout_seconds)
        self.settings = settings
        self.max_attempts = max_attempts
        self._client = client
        self._owns_app = client is None
        self._app = None

    # ---------- lifecycle ----------
    def _credentials(self):
        inline = self.settings.inline_credentials
        if inline:
            return credentials.Certificate(inline)
        return credentials.Certificate(self.settings.firebase_cred_file)

    def _open(self) -> None:
        if self._client is not None:
            return
        options = {}
        if self.settings.firebase_project_id:
            options["projectId"] = self.settings.firebase_project_id
        try:
            self._app = firebase_admin.initialize_app(self._credentials(), options, name=_FIREBASE_APP_NAME)
        except ValueError as e:
            if "already exists" in str(e):
                self._app = firebase_admin.get_app(_FIREBASE_APP_NAME)
            else:
                raise
        self._client = firestore.client(app=self._app)
        logger.info("Firestore client ready (project=%s)", self.settings.firebase_project_id)

    def _close(self) -> None:
        if not self._owns_app:
            return
        if self._client is not None:
            self._client.close()
        if self._app is not None:
            firebase_admin.delete_app(self._app)
        self._client = None
        self._app = None
        logger.info("Firestore client closed")

    @property
    def client(self):
        self.connect()
        return self._client

    def _ref(self, collection: str):
        return self.client.collection(self.collection_name(collection))

    def _query(self, collection: str, filters: Sequence[Filter]):
        q = self._ref(collection)
        for field, op, value in filters:
            q = q.where(filter=FieldFilter(field, op, value))
        return q

    @staticmethod
    def _out(snap) -> Document:
        data = snap.to_dict() or {}
        data["id"] = snap.id
        return data

    # ---------- reads ----------
    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with _translate_errors():
            snap = self._ref(collection).document(doc_id).get(timeout=self.timeout)
        return self._out(snap) if snap.exists else None

    def find(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Document]:
        q = self._query(collection, filters)
        with _translate_errors():
            if order_by:
                direction = gcf.Query.DESCENDING if descending else gcf.Query.ASCENDING
                ordered = q.order_by(order_by, direction=direction)
                if limit is not None:
                    ordered = ordered.limit(limit)
                try:
                    return [self._out(s) for s in ordered.stream(timeout=self.timeout)]
                except gexc.FailedPrecondition:
                    # no composite index: unordered query, sorted here
                    logger.warning("Missing index for %s ordered by %s; sorting in memory", collection, order_by)
                    rows = [self._out(s) for s in q.stream(timeout=self.timeout)]
                    rows.sort(key=sort_key(order_by), reverse=descending)
                    return rows[:limit] if limit is not None else rows
            if limit is not None:
                q = q.limit(limit)
            return [self._out(s) for s in q.stream(timeout=self.timeout)]

    def scan(self, collection: str, filters: Sequence[Filter] = ()) -> Iterator[Document]:
        stream = self._query(collection, filters).stream(timeout=self.timeout)
        while True:
            with _translate_errors():
                snap = next(stream, None)
            if snap is None:
                return
            yield self._out(snap)

    # ---------- writes ----------
    def insert(self, collection: str, data: Document, doc_id: Optional[str] = None) -> Document:
        col = self._ref(collection)
        ref = col.document(doc_id) if doc_id else col.document()
        payload = {k: v for k, v in data.items() if k != "id"}
        with _translate_errors():
            ref.set(payload, timeout=self.timeout)
        return {**payload, "id": ref.id}

    def update_one(
        self,
        collection: str,
        doc_id: str,
        mutate: Mutation,
        upsert: bool = True,
    ) -> Optional[Document]:
        ref = self._ref(collection).document(doc_id)
        timeout = self.timeout

        @gcf.transactional
        def _run(transaction):
            snap = ref.get(transaction=transaction, timeout=timeout)
            current = snap.to_dict() if snap.exists else None
            if current is None and not upsert:
                return None
            new = mutate(current)
            payload = {k: v for k, v in new.items() if k != "id"}
            transaction.set(ref, payload)
            return payload

        with _translate_errors():
            payload = _run(self.client.transaction(max_attempts=self.max_attempts))
        if payload is None:
            return None
        return {**payload, "id": doc_id}

    def set_fields(self, collection: str, doc_id: str, fields: Document) -> Document:
        ref = self._ref(collection).document(doc_id)
        with _translate_errors():
            try:
                ref.update(fields, timeout=self.timeout)
            except gexc.NotFound as exc:
                raise NotFound() from exc
            snap = ref.get(timeout=self.timeout)
        return self._out(snap)

    def delete(self, collection: str, doc_id: str) -> bool:
        ref = self._ref(collection).document(doc_id)
        with _translate_errors():
            existed = ref.get(timeout=self.timeout).exists
            if existed:
                ref.delete(timeout=self.timeout)
        return existed
