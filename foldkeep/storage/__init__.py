# foldkeep/storage/__init__.py
from foldkeep.storage.documents import DocumentStore

__all__ = ["DocumentStore"]
