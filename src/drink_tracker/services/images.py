"""Can image storage and lookup.

Uploads walk an ordered list of storage strategies until one yields a URL;
lookups merge an ordered list of resolvers where earlier resolvers win. The
local image store is written on every successful upload so it can serve as a
backstop when the remote tiers are unavailable. Local entries are scoped to the
uploading user; uploads without a user land in a scope no library reads.
"""

import base64
import logging
import mimetypes
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from drink_tracker.domain.drinks import can_key
from drink_tracker.domain.errors import DataAccessError, ImageReadError
from drink_tracker.domain.library import CanImage, ImageFile

_logger = logging.getLogger(__name__)


class CanImageRepository(Protocol):
    """Persistence interface for can image metadata rows."""

    def list_images(self, user_id: UUID) -> list[CanImage]:
        """Return every image row for a user."""

    def upsert_image(
        self, user_id: UUID, can_name: str, series: str, image_url: str
    ) -> CanImage:
        """Create or replace the image row for a can."""

    def delete_image(self, user_id: UUID, can_name: str, series: str) -> None:
        """Delete the image row for a can."""


class ObjectStorage(Protocol):
    """Interface for the remote image bucket."""

    def upload(self, path: str, content: bytes, content_type: str | None) -> None:
        """Upload bytes to a bucket path."""

    def get_public_url(self, path: str) -> str:
        """Return the public URL for a bucket path."""


class UrlChecker(Protocol):
    """Interface for checking that a URL can be fetched."""

    async def is_reachable(self, url: str) -> bool:
        """Return True when the URL answers a HEAD request successfully."""


class LocalImageStore(Protocol):
    """Key-value store for locally cached image URLs, scoped per user."""

    def load(self, user_id: UUID | None) -> dict[str, str]:
        """Return every cached key and URL for one user."""

    def save(self, user_id: UUID | None, images: dict[str, str]) -> None:
        """Replace the cached images for one user."""


class ImageStorageStrategy(Protocol):
    """One tier of the upload chain."""

    async def store(
        self, user_id: UUID | None, can_name: str, series: str, image: ImageFile
    ) -> str | None:
        """Return the stored image URL, or None to fall through."""


class ImageResolver(Protocol):
    """One tier of the lookup chain."""

    def load(self, user_id: UUID) -> dict[str, str]:
        """Return known image URLs keyed by can key."""


@dataclass
class RemoteStorageStrategy:
    """Upload to object storage and record the public URL."""

    storage: ObjectStorage
    repository: CanImageRepository
    checker: UrlChecker

    async def store(
        self, user_id: UUID | None, can_name: str, series: str, image: ImageFile
    ) -> str | None:
        """Upload the image, verify its URL and upsert the metadata row."""
        if user_id is None:
            _logger.info("No authenticated user, skipping remote image storage")
            return None

        millis = int(datetime.now(tz=UTC).timestamp() * 1000)
        path = f"{user_id}/{can_name}_{series}_{millis}.{image.extension}"
        try:
            self.storage.upload(path, image.content, image.content_type)
        except DataAccessError:
            _logger.warning(
                "Image upload failed, falling back",
                exc_info=True,
                extra={"user_id": str(user_id), "path": path},
            )
            return None

        try:
            public_url = self.storage.get_public_url(path)
        except DataAccessError:
            _logger.warning(
                "Could not resolve public image URL, falling back",
                exc_info=True,
                extra={"user_id": str(user_id), "path": path},
            )
            return None
        if not await self.checker.is_reachable(public_url):
            _logger.warning(
                "Public image URL not reachable, falling back",
                extra={"user_id": str(user_id), "url": public_url},
            )
            return None

        try:
            self.repository.upsert_image(user_id, can_name, series, public_url)
        except DataAccessError:
            _logger.warning(
                "Failed to save image metadata",
                exc_info=True,
                extra={"user_id": str(user_id), "key": can_key(can_name, series)},
            )
        return public_url


@dataclass
class LocalDataUrlStrategy:
    """Encode the image inline as a base64 data URL."""

    async def store(
        self, user_id: UUID | None, can_name: str, series: str, image: ImageFile
    ) -> str | None:
        """Return the image as a data URL."""
        return to_data_url(image)


@dataclass
class RemoteMetadataResolver:
    """Look up image URLs from the metadata table."""

    repository: CanImageRepository

    def load(self, user_id: UUID) -> dict[str, str]:
        """Return image URLs from the database, or nothing on failure."""
        try:
            images = self.repository.list_images(user_id)
        except DataAccessError:
            _logger.warning(
                "Could not load can images", extra={"user_id": str(user_id)}
            )
            return {}
        return {
            can_key(image.can_name, image.series): image.image_url for image in images
        }


@dataclass
class LocalCacheResolver:
    """Look up image URLs from the local image store."""

    store: LocalImageStore

    def load(self, user_id: UUID) -> dict[str, str]:
        """Return the images cached for this user."""
        return self.store.load(user_id)


@dataclass
class CanImageService:
    """Application service for adding, removing and resolving can images."""

    repository: CanImageRepository
    local_store: LocalImageStore
    strategies: list[ImageStorageStrategy] = field(default_factory=list)
    resolvers: list[ImageResolver] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        repository: CanImageRepository,
        storage: ObjectStorage,
        checker: UrlChecker,
        local_store: LocalImageStore,
    ) -> "CanImageService":
        """Build the service with the default remote-then-local tiers."""
        return cls(
            repository=repository,
            local_store=local_store,
            strategies=[
                RemoteStorageStrategy(storage, repository, checker),
                LocalDataUrlStrategy(),
            ],
            resolvers=[
                RemoteMetadataResolver(repository),
                LocalCacheResolver(local_store),
            ],
        )

    async def add_can_image(
        self, user_id: UUID | None, can_name: str, series: str, image: ImageFile
    ) -> str:
        """Store an image for a can and return its display URL."""
        if not image.content:
            raise ImageReadError("Failed to read image file")
        for strategy in self.strategies:
            url = await strategy.store(user_id, can_name, series, image)
            if url is not None:
                self._write_local(user_id, can_key(can_name, series), url)
                return url
        raise ImageReadError("Failed to process image")

    def remove_can_image(self, user_id: UUID, can_name: str, series: str) -> None:
        """Remove the image for a can from every tier."""
        try:
            self.repository.delete_image(user_id, can_name, series)
        except DataAccessError:
            _logger.warning(
                "Failed to delete image metadata",
                exc_info=True,
                extra={"user_id": str(user_id), "key": can_key(can_name, series)},
            )
        images = self.local_store.load(user_id)
        images.pop(can_key(can_name, series), None)
        self.local_store.save(user_id, images)

    def load_image_map(self, user_id: UUID) -> dict[str, str]:
        """Merge every resolver, earlier resolvers taking precedence."""
        merged: dict[str, str] = {}
        for resolver in self.resolvers:
            for key, url in resolver.load(user_id).items():
                merged.setdefault(key, url)
        return merged

    def resolve_image(self, user_id: UUID, can_name: str, series: str) -> str | None:
        """Return the display URL for one can, if any."""
        return self.load_image_map(user_id).get(can_key(can_name, series))

    def _write_local(self, user_id: UUID | None, key: str, url: str) -> None:
        images = self.local_store.load(user_id)
        images[key] = url
        self.local_store.save(user_id, images)


def to_data_url(image: ImageFile) -> str:
    """Encode image bytes as a self-contained data URL."""
    if not image.content:
        raise ImageReadError("Failed to read image file")
    mime = (
        image.content_type
        or mimetypes.guess_type(image.filename)[0]
        or "application/octet-stream"
    )
    encoded = base64.b64encode(image.content).decode("ascii")
    return f"data:{mime};base64,{encoded}"
