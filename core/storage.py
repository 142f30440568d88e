"""
Deliverable Storage - Blob storage for uploaded deliverables.

Files go to Django's default storage: S3 through django-storages when
AWS_STORAGE_BUCKET_NAME is configured, the local filesystem otherwise.

Usage:
    from core.storage import store_deliverable_file

    stored = store_deliverable_file(project.id, request.FILES['file'])
    stored.url  # retrieval URL persisted on the Deliverable row
"""

import logging
import os
import uuid
from dataclasses import dataclass

from django.core.files.storage import default_storage
from django.utils.text import get_valid_filename

logger = logging.getLogger(__name__)

DELIVERABLES_PREFIX = 'deliverables'


@dataclass(frozen=True)
class StoredFile:
    """Result of a confirmed upload."""

    name: str
    url: str
    original_name: str
    size: int
    content_type: str


def build_storage_path(project_id, filename: str) -> str:
    """Return a collision-free storage path under the project's folder."""
    base, ext = os.path.splitext(get_valid_filename(os.path.basename(filename)) or 'file')
    return f"{DELIVERABLES_PREFIX}/{project_id}/{uuid.uuid4().hex}_{base[:80]}{ext.lower()}"


def store_deliverable_file(project_id, upload, storage=None) -> StoredFile:
    """
    Persist an uploaded file and return its retrieval details.

    Raises whatever the storage backend raises; callers must not create a
    Deliverable row unless this returns.
    """
    storage = storage or default_storage
    path = build_storage_path(project_id, upload.name)

    try:
        name = storage.save(path, upload)
    except Exception:
        logger.exception("Upload of %r for project %s failed", upload.name, project_id)
        raise

    url = storage.url(name)
    logger.info("Stored deliverable %s for project %s (%d bytes)", name, project_id, upload.size)

    return StoredFile(
        name=name,
        url=url,
        original_name=upload.name,
        size=upload.size,
        content_type=getattr(upload, 'content_type', '') or '',
    )


def discard_stored_file(stored: StoredFile, storage=None) -> None:
    """Remove a stored file whose Deliverable row was never written."""
    storage = storage or default_storage
    try:
        storage.delete(stored.name)
    except Exception:
        logger.exception("Could not remove orphaned upload %s", stored.name)
