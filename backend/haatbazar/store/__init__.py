from haatbazar.config import Settings
from haatbazar.store.base import Document, DocumentStore, Filter
from haatbazar.store.firestore import FirestoreStore
from haatbazar.store.memory import MemoryStore


def create_store(settings: Settings) -> DocumentStore:
    """Build (but do not open) the store selected by `settings.store_backend`."""
    if settings.store_backend == "memory":
        return MemoryStore(prefix=settings.collection_prefix, timeout=settings.store_timeout_seconds)
    return FirestoreStore(settings)


__all__ = ["Document", "DocumentStore", "Filter", "FirestoreStore", "MemoryStore", "create_store"]
