"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import ClientOptions, create_client

from drink_tracker.adapters.httpx_url_checker import HttpxUrlChecker
from drink_tracker.adapters.json_image_store import JsonFileImageStore, NullImageStore
from drink_tracker.adapters.supabase_auth_client import SupabaseAuthClient
from drink_tracker.adapters.supabase_can_image_repository import (
    SupabaseCanImageRepository,
)
from drink_tracker.adapters.supabase_drink_repository import SupabaseDrinkRepository
from drink_tracker.adapters.supabase_object_storage import SupabaseObjectStorage
from drink_tracker.config import Settings
from drink_tracker.services.auth import AuthService
from drink_tracker.services.drinks import DrinkService
from drink_tracker.services.images import CanImageService, LocalImageStore
from drink_tracker.services.library import LibraryService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    drink_service: DrinkService
    image_service: CanImageService
    library_service: LibraryService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    # Sign-in mutates its client's auth header; data access stays on the service key.
    auth_client = create_client(
        resolved_settings.supabase_url,
        resolved_settings.supabase_anon_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )
    drink_repository = SupabaseDrinkRepository(supabase_client)
    image_repository = SupabaseCanImageRepository(supabase_client)
    storage = SupabaseObjectStorage(
        supabase_client, bucket=resolved_settings.can_images_bucket
    )
    checker = HttpxUrlChecker.create(
        timeout=resolved_settings.reachability_timeout_seconds
    )
    local_store: LocalImageStore = (
        JsonFileImageStore(Path(resolved_settings.local_image_cache_path))
        if resolved_settings.local_image_cache_path
        else NullImageStore()
    )
    image_service = CanImageService.create(
        repository=image_repository,
        storage=storage,
        checker=checker,
        local_store=local_store,
    )
    drink_service = DrinkService(drink_repository)
    library_service = LibraryService(
        drink_repository=drink_repository,
        image_service=image_service,
    )
    auth_service = AuthService(SupabaseAuthClient(auth_client))

    async def close_resources() -> None:
        await checker.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=auth_service,
        drink_service=drink_service,
        image_service=image_service,
        library_service=library_service,
        close_resources=close_resources,
    )
