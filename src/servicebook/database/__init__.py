"""Database layer for servicebook application."""

from servicebook.database.base import Database
from servicebook.database.blobs import BlobStore, LocalBlobStore, create_local_blob_store
from servicebook.database.factories import create_sqlite_database

__all__ = [
    "Database",
    "BlobStore",
    "LocalBlobStore",
    "create_local_blob_store",
    "create_sqlite_database",
]
