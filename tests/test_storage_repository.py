# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for donation photo storage.
"""

from unittest.mock import ANY

import pytest

from carebridge.models.outcome import Error, Success
from carebridge.repositories.storage import StorageRepository, donation_folder, donation_image_path

PUBLIC_BASE = "https://test-project.supabase.co/storage/v1/object/public/donation-photos"


class TestStoragePaths:

    def test_folder_and_path(self):
        assert donation_folder("don-1") == "donations/don-1"
        assert donation_image_path("don-1", "abc") == "donations/don-1/don-1_abc.jpg"


class TestStorageRepository:
    """Test photo upload, listing and deletion."""

    @pytest.fixture
    def repository(self, supabase_service, fake_client):
        fake_client.bucket.get_public_url.side_effect = lambda path: f"{PUBLIC_BASE}/{path}"
        return StorageRepository(supabase_service)

    def test_upload_uses_configured_bucket(self, repository, fake_client):
        result = repository.upload_donation_image("don-1", b"\xff\xd8jpeg")

        assert isinstance(result, Success)
        assert result.value.startswith(f"{PUBLIC_BASE}/donations/don-1/don-1_")
        assert result.value.endswith(".jpg")
        fake_client.storage.from_.assert_called_with("donation-photos")
        fake_client.bucket.upload.assert_called_once_with(
            ANY, b"\xff\xd8jpeg", file_options={"content-type": "image/jpeg"}
        )

    def test_upload_paths_are_unique(self, repository, fake_client):
        repository.upload_donation_image("don-1", b"one")
        repository.upload_donation_image("don-1", b"two")

        paths = [call.args[0] for call in fake_client.bucket.upload.call_args_list]
        assert len(set(paths)) == 2

    def test_empty_image_is_rejected(self, repository, fake_client):
        assert repository.upload_donation_image("don-1", b"") == Error("Failed to read image")
        fake_client.bucket.upload.assert_not_called()

    def test_upload_failure(self, repository, fake_client):
        fake_client.bucket.upload.side_effect = Exception("Payload too large")

        assert repository.upload_donation_image("don-1", b"data") == Error("Payload too large")

    def test_upload_many_stops_at_first_failure(self, repository, fake_client):
        result = repository.upload_donation_images("don-1", [b"one", b"", b"three"])

        assert result == Error("Failed to read image")
        assert fake_client.bucket.upload.call_count == 1

    def test_upload_many(self, repository):
        result = repository.upload_donation_images("don-1", [b"one", b"two"])

        assert len(result.value) == 2

    def test_list_images(self, repository, fake_client):
        fake_client.bucket.list.return_value = [{"name": "don-1_a.jpg"}, {"name": "don-1_b.jpg"}]

        result = repository.list_donation_images("don-1")

        fake_client.bucket.list.assert_called_once_with("donations/don-1")
        assert result.value == ["donations/don-1/don-1_a.jpg", "donations/don-1/don-1_b.jpg"]

    def test_delete_image_by_public_url(self, repository, fake_client):
        result = repository.delete_donation_image(f"{PUBLIC_BASE}/donations/don-1/don-1_a.jpg")

        assert result == Success(None)
        fake_client.bucket.remove.assert_called_once_with(["donations/don-1/don-1_a.jpg"])

    def test_delete_all_images(self, repository, fake_client):
        fake_client.bucket.list.return_value = [{"name": "don-1_a.jpg"}]

        assert repository.delete_donation_images("don-1") == Success(None)
        fake_client.bucket.remove.assert_called_once_with(["donations/don-1/don-1_a.jpg"])

    def test_delete_all_images_when_none(self, repository, fake_client):
        fake_client.bucket.list.return_value = []

        assert repository.delete_donation_images("don-1") == Success(None)
        fake_client.bucket.remove.assert_not_called()

    def test_public_url(self, repository):
        assert repository.public_url("donations/don-1/x.jpg") == Success(f"{PUBLIC_BASE}/donations/don-1/x.jpg")
