"""
Upload Validation and Storage Tests

This module tests:
1. Allowed content types and the size limit for deliverables
2. Storage paths and the stored-file record
"""

import pytest
from django.core.exceptions import ValidationError
from django.core.files.storage import FileSystemStorage
from django.core.files.uploadedfile import SimpleUploadedFile

from core.storage import build_storage_path, discard_stored_file, store_deliverable_file
from core.validators import (
    INVALID_TYPE_MESSAGE,
    DeliverableFileValidator,
    is_allowed_content_type,
    validate_file_upload,
)


class TestContentTypes:

    @pytest.mark.parametrize('content_type', [
        'image/png',
        'image/jpeg',
        'application/pdf',
        'application/msword',
        'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
        'application/vnd.ms-excel',
        'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        'application/zip',
        'text/plain',
        'text/plain; charset=utf-8',
    ])
    def test_allowed(self, content_type):
        assert is_allowed_content_type(content_type)

    @pytest.mark.parametrize('content_type', [
        'application/x-msdownload', 'text/html', 'video/mp4', '', None,
    ])
    def test_rejected(self, content_type):
        assert not is_allowed_content_type(content_type)


class TestValidateFileUpload:

    def test_valid_pdf(self):
        upload = SimpleUploadedFile('a.pdf', b'%PDF', content_type='application/pdf')
        assert validate_file_upload(upload, max_size=1024) == (True, None)

    def test_too_large(self):
        upload = SimpleUploadedFile('a.pdf', b'x' * 2048, content_type='application/pdf')

        is_valid, error = validate_file_upload(upload, max_size=1024)

        assert not is_valid
        assert error == "File size exceeds maximum of 0.0MB"

    def test_default_limit_is_ten_megabytes(self, settings):
        del settings.DELIVERABLE_MAX_UPLOAD_SIZE
        upload = SimpleUploadedFile('big.zip', b'x', content_type='application/zip')
        upload.size = 10 * 1024 * 1024 + 1

        is_valid, error = validate_file_upload(upload)

        assert not is_valid
        assert error == "File size exceeds maximum of 10.0MB"

    def test_bad_type(self):
        upload = SimpleUploadedFile('a.exe', b'MZ', content_type='application/x-msdownload')
        assert validate_file_upload(upload, max_size=1024) == (False, INVALID_TYPE_MESSAGE)

    def test_field_validator_raises(self):
        upload = SimpleUploadedFile('a.exe', b'MZ', content_type='application/x-msdownload')
        with pytest.raises(ValidationError):
            DeliverableFileValidator(max_size=1024)(upload)


class TestStorage:

    def test_storage_path_is_scoped_and_unique(self):
        first = build_storage_path('p1', '../../etc/My Report.PDF')
        second = build_storage_path('p1', '../../etc/My Report.PDF')

        assert first.startswith('deliverables/p1/')
        assert first.endswith('_My_Report.pdf')
        assert '..' not in first
        assert first != second

    def test_store_and_discard(self, tmp_path):
        storage = FileSystemStorage(location=str(tmp_path), base_url='/media/')
        upload = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')

        stored = store_deliverable_file('p1', upload, storage=storage)

        assert stored.original_name == 'notes.txt'
        assert stored.size == 5
        assert stored.content_type == 'text/plain'
        assert stored.url.startswith('/media/deliverables/p1/')
        assert storage.exists(stored.name)

        discard_stored_file(stored, storage=storage)
        assert not storage.exists(stored.name)
