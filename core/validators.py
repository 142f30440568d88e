"""
Upload Validators - Deliverable file checks.

Deliverables accept images, PDFs, office documents, spreadsheets, zip
archives and plain text, up to DELIVERABLE_MAX_UPLOAD_SIZE bytes.

Usage:
    from core.validators import DeliverableFileValidator

    class UploadSerializer(serializers.Serializer):
        file = serializers.FileField(validators=[DeliverableFileValidator()])
"""

import logging
from typing import Optional, Set, Tuple

from django.conf import settings
from django.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


# =============================================================================
# FILE UPLOAD VALIDATION
# =============================================================================

DEFAULT_MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10MB

# Any image/* type is accepted in addition to these
DELIVERABLE_MIME_TYPES = {
    'application/pdf',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'application/vnd.ms-excel',
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'application/zip',
    'text/plain',
}

INVALID_TYPE_MESSAGE = (
    "Invalid file type. Only images, PDFs, documents, spreadsheets, "
    "zip files, and text files are allowed."
)


def is_allowed_content_type(content_type: Optional[str], allowed: Set[str] = None) -> bool:
    if not content_type:
        return False
    allowed = DELIVERABLE_MIME_TYPES if allowed is None else allowed
    content_type = content_type.split(';')[0].strip().lower()
    return content_type.startswith('image/') or content_type in allowed


def validate_file_upload(file, max_size: Optional[int] = None) -> Tuple[bool, Optional[str]]:
    """
    Validate an uploaded deliverable.

    Checks:
    - File size
    - MIME type declared by the client

    Args:
        file: The uploaded file object
        max_size: Maximum file size in bytes (defaults to settings)

    Returns:
        Tuple of (is_valid, error_message)
    """
    if max_size is None:
        max_size = getattr(settings, 'DELIVERABLE_MAX_UPLOAD_SIZE', DEFAULT_MAX_UPLOAD_SIZE)

    if file.size > max_size:
        max_mb = max_size / (1024 * 1024)
        return False, f"File size exceeds maximum of {max_mb:.1f}MB"

    content_type = getattr(file, 'content_type', None)
    if not is_allowed_content_type(content_type):
        logger.warning("Rejected upload %r with content type %r", file.name, content_type)
        return False, INVALID_TYPE_MESSAGE

    return True, None


class DeliverableFileValidator:
    """Field validator wrapping validate_file_upload."""

    def __init__(self, max_size: Optional[int] = None):
        self.max_size = max_size

    def __call__(self, file) -> None:
        is_valid, error = validate_file_upload(file, max_size=self.max_size)
        if not is_valid:
            raise ValidationError(error)

    def __eq__(self, other):
        return isinstance(other, DeliverableFileValidator) and self.max_size == other.max_size
