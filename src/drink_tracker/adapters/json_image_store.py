"""Local image cache persisted as a single JSON blob."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from uuid import UUID

from drink_tracker.services.images import LocalImageStore

_logger = logging.getLogger(__name__)

STORAGE_KEY = "monster_can_images"
ANONYMOUS_SCOPE = "anonymous"


def _scope(user_id: UUID | None) -> str:
    return str(user_id) if user_id is not None else ANONYMOUS_SCOPE


@dataclass
class JsonFileImageStore(LocalImageStore):
    """Stores cached image URLs per user in a JSON file under one storage key.

    The file holds ``{STORAGE_KEY: {user_id: {can_key: url}}}``; uploads made
    without a user are kept under ``ANONYMOUS_SCOPE``.
    """

    path: Path

    def load(self, user_id: UUID | None) -> dict[str, str]:
        """Return the images cached for one user."""
        return dict(self._read().get(_scope(user_id), {}))

    def save(self, user_id: UUID | None, images: dict[str, str]) -> None:
        """Replace the images cached for one user, keeping every other user."""
        scopes = self._read()
        if images:
            scopes[_scope(user_id)] = images
        else:
            scopes.pop(_scope(user_id), None)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({STORAGE_KEY: scopes}), encoding="utf-8")
        except OSError:
            _logger.exception("Error saving local image cache")

    def _read(self) -> dict[str, dict[str, str]]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError):
            _logger.exception("Error reading local image cache")
            return {}
        scopes = raw.get(STORAGE_KEY) if isinstance(raw, dict) else None
        if not isinstance(scopes, dict):
            return {}
        return {
            str(scope): {str(key): str(url) for key, url in images.items()}
            for scope, images in scopes.items()
            if isinstance(images, dict)
        }


@dataclass
class NullImageStore(LocalImageStore):
    """Image store used when no local cache is configured."""

    def load(self, user_id: UUID | None) -> dict[str, str]:
        """Return nothing."""
        return {}

    def save(self, user_id: UUID | None, images: dict[str, str]) -> None:
        """Discard the images."""
