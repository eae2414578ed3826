# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Donation photo storage.

Photos live under ``donations/<donation id>/`` in the configured bucket,
``donation-photos`` by default.
"""

import uuid
from typing import Iterable, List

from opentelemetry import trace

from carebridge.models.outcome import Error, Outcome, Success
from carebridge.repositories.base import BaseRepository

tracer = trace.get_tracer(__name__)

IMAGE_CONTENT_TYPE = "image/jpeg"


def donation_folder(donation_id: str) -> str:
    return f"donations/{donation_id}"


def donation_image_path(donation_id: str, unique: str) -> str:
    """Object path for one donation photo."""
    return f"{donation_folder(donation_id)}/{donation_id}_{unique}.jpg"


class StorageRepository(BaseRepository):
    """Upload, list and delete donation photos."""

    @property
    def bucket_name(self) -> str:
        return self.supabase.config.storage_bucket

    def upload_donation_image(self, donation_id: str, image: bytes) -> Outcome[str]:
        """
        Upload one JPEG photo for a donation.

        Returns:
            Public URL of the stored object
        """
        with tracer.start_as_current_span("storage.upload_image") as span:
            span.set_attributes({"donation.id": donation_id, "image.size": len(image or b"")})
            if not image:
                return Error("Failed to read image")
            try:
                path = donation_image_path(donation_id, str(uuid.uuid4()))
                bucket = self.supabase.bucket(self.bucket_name)
                bucket.upload(path, image, file_options={"content-type": IMAGE_CONTENT_TYPE})
                url = bucket.get_public_url(path)
                self.logger.info(f"Uploaded donation image {path}", extra={"donation_id": donation_id})
                return Success(url)
            except Exception as e:
                return self._failure(e, "Failed to upload image", donation_id=donation_id)

    def upload_donation_images(self, donation_id: str, images: Iterable[bytes]) -> Outcome[List[str]]:
        """Upload photos in order, stopping at the first failure."""
        urls: List[str] = []
        for image in images:
            result = self.upload_donation_image(donation_id, image)
            if isinstance(result, Error):
                return result
            urls.append(result.value)
        return Success(urls)

    def public_url(self, path: str) -> Outcome[str]:
        try:
            return Success(self.supabase.bucket(self.bucket_name).get_public_url(path))
        except Exception as e:
            return self._failure(e, "Failed to get image URL", path=path)

    def list_donation_images(self, donation_id: str) -> Outcome[List[str]]:
        """Object paths of every photo of a donation."""
        with tracer.start_as_current_span("storage.list_images") as span:
            span.set_attribute("donation.id", donation_id)
            try:
                folder = donation_folder(donation_id)
                files = self.supabase.bucket(self.bucket_name).list(folder)
                return Success([f"{folder}/{entry['name']}" for entry in files or []])
            except Exception as e:
                return self._failure(e, "Failed to list images", donation_id=donation_id)

    def delete_donation_image(self, image_url: str) -> Outcome[None]:
        """Delete a photo given its public URL."""
        with tracer.start_as_current_span("storage.delete_image"):
            try:
                marker = f"{self.bucket_name}/"
                path = image_url.split(marker, 1)[1] if marker in image_url else image_url
                self.supabase.bucket(self.bucket_name).remove([path])
                self.logger.info(f"Deleted donation image {path}")
                return Success(None)
            except Exception as e:
                return self._failure(e, "Failed to delete image", image_url=image_url)

    def delete_donation_images(self, donation_id: str) -> Outcome[None]:
        """Delete every photo of a donation."""
        with tracer.start_as_current_span("storage.delete_images") as span:
            span.set_attribute("donation.id", donation_id)
            try:
                listed = self.list_donation_images(donation_id)
                if isinstance(listed, Error):
                    return listed
                if listed.value:
                    self.supabase.bucket(self.bucket_name).remove(listed.value)
                self.logger.info(
                    f"Deleted {len(listed.value)} images for donation {donation_id}"
                )
                return Success(None)
            except Exception as e:
                return self._failure(e, "Failed to delete images", donation_id=donation_id)
