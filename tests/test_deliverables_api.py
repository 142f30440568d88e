"""
Deliverables API Tests

This module tests the /api/deliverables endpoints:
1. Multipart upload by the selected seller, with type and size limits
2. Listing (owning buyer and selected seller only, newest first)
3. Completing a project
"""

from datetime import timedelta
from unittest.mock import patch

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from conftest import DeliverableFactory
from projects.models import Deliverable, Project


def deliverables_url(project_id):
    return reverse('projects:deliverable-list', args=[project_id])


def complete_url(project_id):
    return reverse('projects:deliverable-complete', args=[project_id])


def _upload(name='design.pdf', content=b'%PDF-1.4 design', content_type='application/pdf'):
    return SimpleUploadedFile(name, content, content_type=content_type)


@pytest.mark.django_db
class TestSubmitDeliverable:

    def test_selected_seller_uploads(self, seller, seller_client, in_progress_project):
        response = seller_client.post(
            deliverables_url(in_progress_project.id),
            {'file': _upload(), 'description': 'Final designs'},
            format='multipart',
        )

        assert response.status_code == status.HTTP_201_CREATED
        deliverable = response.json()['deliverable']
        assert deliverable['fileName'] == 'design.pdf'
        assert deliverable['fileType'] == 'application/pdf'
        assert deliverable['description'] == 'Final designs'
        assert deliverable['submittedById'] == str(seller.id)
        assert deliverable['fileUrl'].startswith('http://testserver/')

    def test_images_are_accepted(self, seller_client, in_progress_project):
        response = seller_client.post(
            deliverables_url(in_progress_project.id),
            {'file': _upload('mock.png', b'\x89PNG', 'image/png')},
            format='multipart',
        )
        assert response.status_code == status.HTTP_201_CREATED

    def test_file_required(self, seller_client, in_progress_project):
        response = seller_client.post(
            deliverables_url(in_progress_project.id), {'description': 'No file'}, format='multipart',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['message'] == "Please provide a file"

    def test_disallowed_type(self, seller_client, in_progress_project):
        response = seller_client.post(
            deliverables_url(in_progress_project.id),
            {'file': _upload('run.exe', b'MZ', 'application/x-msdownload')},
            format='multipart',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['message'].startswith("Invalid file type.")
        assert not Deliverable.objects.exists()

    @override_settings(DELIVERABLE_MAX_UPLOAD_SIZE=10)
    def test_oversized_file(self, seller_client, in_progress_project):
        response = seller_client.post(
            deliverables_url(in_progress_project.id),
            {'file': _upload(content=b'x' * 11)},
            format='multipart',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['message'].startswith("File size exceeds maximum of")

    def test_other_seller_forbidden(self, other_seller_client, in_progress_project):
        response = other_seller_client.post(
            deliverables_url(in_progress_project.id), {'file': _upload()}, format='multipart',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()['message'] == "You are not the selected seller for this project"

    def test_buyer_forbidden(self, buyer_client, in_progress_project):
        response = buyer_client.post(
            deliverables_url(in_progress_project.id), {'file': _upload()}, format='multipart',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()['message'] == "Only sellers can submit deliverables"

    def test_pending_project_rejected(self, seller_client, project):
        response = seller_client.post(deliverables_url(project.id), {'file': _upload()}, format='multipart')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['message'] == (
            "Cannot submit deliverables for a project that is not in progress"
        )

    def test_storage_outage_is_a_bare_500(self, seller_client, in_progress_project):
        with patch('projects.services.store_deliverable_file', side_effect=OSError('s3 unreachable')):
            response = seller_client.post(
                deliverables_url(in_progress_project.id), {'file': _upload()}, format='multipart',
            )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {'status': 'error', 'message': 'Internal Server Error'}
        assert not Deliverable.objects.exists()


@pytest.mark.django_db
class TestListDeliverables:

    def test_owner_lists_newest_first(self, buyer_client, seller, in_progress_project):
        first = DeliverableFactory(project=in_progress_project, submitted_by=seller)
        second = DeliverableFactory(project=in_progress_project, submitted_by=seller)
        Deliverable.objects.filter(pk=first.pk).update(created_at=timezone.now() - timedelta(hours=1))

        response = buyer_client.get(deliverables_url(in_progress_project.id))

        assert response.status_code == status.HTTP_200_OK
        assert [d['id'] for d in response.json()['deliverables']] == [str(second.id), str(first.id)]

    def test_selected_seller_lists(self, seller_client, in_progress_project):
        response = seller_client.get(deliverables_url(in_progress_project.id))
        assert response.status_code == status.HTTP_200_OK

    @pytest.mark.parametrize('client_fixture', ['other_buyer_client', 'other_seller_client'])
    def test_outsiders_forbidden(self, request, client_fixture, in_progress_project):
        client = request.getfixturevalue(client_fixture)

        response = client.get(deliverables_url(in_progress_project.id))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()['message'] == "You do not have permission to access this project"


@pytest.mark.django_db
class TestCompleteProject:

    def test_owner_completes(self, buyer_client, seller, in_progress_project):
        DeliverableFactory(project=in_progress_project, submitted_by=seller)

        with patch('projects.tasks.send_project_completed_email.delay'):
            response = buyer_client.put(complete_url(in_progress_project.id))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['project']['status'] == 'COMPLETED'

    def test_requires_deliverables(self, buyer_client, in_progress_project):
        response = buyer_client.put(complete_url(in_progress_project.id))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['message'] == "Cannot complete a project with no deliverables"

    def test_pending_project_rejected(self, buyer_client, project):
        response = buyer_client.put(complete_url(project.id))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['message'] == "Cannot complete a project that is not in progress"

    def test_seller_forbidden(self, seller_client, in_progress_project):
        response = seller_client.put(complete_url(in_progress_project.id))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()['message'] == "Only buyers can mark projects as complete"

    def test_other_buyer_forbidden(self, other_buyer_client, in_progress_project):
        response = other_buyer_client.put(complete_url(in_progress_project.id))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()['message'] == "You do not have permission to complete this project"
        assert Project.objects.get(pk=in_progress_project.pk).status == Project.Status.IN_PROGRESS
