from .persistence import BlobStore, InMemoryStore, JsonFileStore, StorageError
from .store import ProjectStore, new_project

__all__ = [
    "BlobStore",
    "InMemoryStore",
    "JsonFileStore",
    "ProjectStore",
    "StorageError",
    "new_project",
]
