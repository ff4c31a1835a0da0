"""Blob channel for bill images attached to ledger records."""

import logging
import os
import re
import time
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from servicebook.domain.errors import BlobError

logger = logging.getLogger("servicebook.blobs")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class BlobStore(ABC):
    """Abstract document storage. The ledger only keeps returned paths."""

    @abstractmethod
    def upload(self, data: bytes, owner_key: str, filename: str) -> str:
        """Store bytes and return a storage path."""
        pass

    @abstractmethod
    def get_access_url(self, path: str, ttl: int = 3600) -> str:
        """Return a URL granting access to a stored document for ttl seconds."""
        pass


class LocalBlobStore(BlobStore):
    """Blob store backed by a local directory."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def upload(self, data: bytes, owner_key: str, filename: str) -> str:
        safe_owner = _UNSAFE_CHARS.sub("_", owner_key) or "default"
        safe_name = _UNSAFE_CHARS.sub("_", Path(filename).name) or "document"
        relative = f"{safe_owner}/{uuid.uuid4().hex[:12]}_{safe_name}"
        target = self.root / relative
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise BlobError(f"Could not store '{filename}': {e}") from e
        logger.info("Stored document %s (%d bytes)", relative, len(data))
        return relative

    def get_access_url(self, path: str, ttl: int = 3600) -> str:
        root = self.root.resolve()
        target = (root / path).resolve()
        if not target.is_relative_to(root):
            raise BlobError(f"Document '{path}' is outside the document store")
        if not target.is_file():
            raise BlobError(f"Document '{path}' not found")
        expires = int(time.time()) + ttl
        return f"{target.as_uri()}?expires={expires}"


def create_local_blob_store(blob_dir: Optional[str] = None) -> LocalBlobStore:
    """Create a local blob store.

    Args:
        blob_dir: Directory for stored documents. If None, checks SERVICEBOOK_BLOB_DIR
            environment variable, then defaults to ~/.servicebook/blobs
    """
    if blob_dir is None:
        blob_dir = os.environ.get("SERVICEBOOK_BLOB_DIR")

    if blob_dir is None:
        blob_dir = str(Path.home() / ".servicebook" / "blobs")

    return LocalBlobStore(blob_dir)
