"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from drink_tracker.config import Settings
from drink_tracker.containers import AppContainer
from drink_tracker.domain.auth import AuthenticatedUser
from drink_tracker.domain.drinks import Drink, DrinkFilters
from drink_tracker.domain.errors import (
    AuthProviderError,
    DataAccessError,
    DrinkNotFoundError,
)
from drink_tracker.domain.library import CanImage
from drink_tracker.services.auth import AuthClient, AuthService, AuthSession
from drink_tracker.services.drinks import DrinkRepository, DrinkService
from drink_tracker.services.images import (
    CanImageRepository,
    CanImageService,
    LocalImageStore,
    ObjectStorage,
    UrlChecker,
)
from drink_tracker.services.library import LibraryService

USER_ID = UUID("6f1c2d3e-4b5a-4c6d-8e7f-0a1b2c3d4e5f")
ACCESS_TOKEN = "valid-token"


def make_drink(  # noqa: PLR0913
    created_at: str,
    name: str = "Monster Energy",
    series: str = "Normal",
    cost: float = 2.99,
    rating: int = 4,
    volume_ml: int = 500,
    user_id: UUID = USER_ID,
) -> Drink:
    """Build a drink from an ISO timestamp."""
    return Drink(
        id=uuid4(),
        user_id=user_id,
        created_at=datetime.fromisoformat(created_at),
        name=name,
        series=series,
        volume_ml=volume_ml,
        cost=cost,
        rating=rating,
    )


@dataclass
class InMemoryDrinkRepository(DrinkRepository):
    """In-memory drink repository for tests."""

    drinks: dict[UUID, Drink] = field(default_factory=dict)
    fail_with: str | None = None

    def add(self, *drinks: Drink) -> None:
        for drink in drinks:
            self.drinks[drink.id] = drink

    def _owned(self, user_id: UUID) -> list[Drink]:
        if self.fail_with:
            raise DataAccessError(self.fail_with)
        owned = [drink for drink in self.drinks.values() if drink.user_id == user_id]
        return sorted(owned, key=lambda drink: drink.created_at, reverse=True)

    def list_drinks(
        self, user_id: UUID, filters: DrinkFilters, limit: int, offset: int
    ) -> list[Drink]:
        results = self._owned(user_id)
        if filters.search:
            results = [
                drink
                for drink in results
                if filters.search.lower() in drink.name.lower()
            ]
        if filters.series:
            results = [drink for drink in results if drink.series == filters.series]
        if filters.date_from:
            results = [d for d in results if d.created_at >= filters.date_from]
        if filters.date_to:
            results = [d for d in results if d.created_at <= filters.date_to]
        return results[offset : offset + limit]

    def list_all_drinks(self, user_id: UUID) -> list[Drink]:
        return self._owned(user_id)

    def get_drink(self, user_id: UUID, drink_id: UUID) -> Drink | None:
        drink = self.drinks.get(drink_id)
        if drink is None or drink.user_id != user_id:
            return None
        return drink

    def create_drink(self, user_id: UUID, payload: dict[str, object]) -> Drink:
        created_at = payload.get("created_at")
        drink = Drink(
            id=uuid4(),
            user_id=user_id,
            created_at=(
                datetime.fromisoformat(str(created_at))
                if created_at
                else datetime.now(tz=UTC)
            ),
            name=str(payload["name"]),
            series=str(payload["series"]),
            volume_ml=int(payload["volume_ml"]),
            cost=float(payload["cost"]),
            rating=int(payload["rating"]),
            notes=payload.get("notes"),
        )
        self.drinks[drink.id] = drink
        return drink

    def update_drink(
        self, user_id: UUID, drink_id: UUID, payload: dict[str, object]
    ) -> Drink:
        current = self.get_drink(user_id, drink_id)
        if current is None:
            raise DrinkNotFoundError(f"Drink {drink_id} not found")
        updated = Drink(
            id=current.id,
            user_id=current.user_id,
            created_at=current.created_at,
            name=str(payload.get("name", current.name)),
            series=str(payload.get("series", current.series)),
            volume_ml=int(payload.get("volume_ml", current.volume_ml)),
            cost=float(payload.get("cost", current.cost)),
            rating=int(payload.get("rating", current.rating)),
            notes=payload.get("notes", current.notes),
        )
        self.drinks[drink_id] = updated
        return updated

    def delete_drink(self, user_id: UUID, drink_id: UUID) -> None:
        if self.get_drink(user_id, drink_id) is not None:
            self.drinks.pop(drink_id)


@dataclass
class InMemoryCanImageRepository(CanImageRepository):
    """In-memory can image repository for tests."""

    images: dict[tuple[UUID, str, str], CanImage] = field(default_factory=dict)
    fail_list: bool = False
    fail_upsert: bool = False
    fail_delete: bool = False

    def list_images(self, user_id: UUID) -> list[CanImage]:
        if self.fail_list:
            raise DataAccessError('relation "can_images" does not exist')
        return [image for key, image in self.images.items() if key[0] == user_id]

    def upsert_image(
        self, user_id: UUID, can_name: str, series: str, image_url: str
    ) -> CanImage:
        if self.fail_upsert:
            raise DataAccessError("permission denied for table can_images")
        image = CanImage(
            id=uuid4(),
            user_id=user_id,
            can_name=can_name,
            series=series,
            image_url=image_url,
            created_at=datetime.now(tz=UTC),
        )
        self.images[(user_id, can_name, series)] = image
        return image

    def delete_image(self, user_id: UUID, can_name: str, series: str) -> None:
        if self.fail_delete:
            raise DataAccessError("permission denied for table can_images")
        self.images.pop((user_id, can_name, series), None)


@dataclass
class FakeObjectStorage(ObjectStorage):
    """Fake storage bucket that records uploads."""

    uploads: dict[str, bytes] = field(default_factory=dict)
    fail: bool = False
    fail_public_url: bool = False
    base_url: str = "https://example.supabase.co/storage/v1/object/public/can_images"

    def upload(self, path: str, content: bytes, content_type: str | None) -> None:
        if self.fail:
            raise DataAccessError("Bucket not found")
        self.uploads[path] = content

    def get_public_url(self, path: str) -> str:
        if self.fail_public_url:
            raise DataAccessError("Public URL unavailable")
        return f"{self.base_url}/{path}"


@dataclass
class FakeUrlChecker(UrlChecker):
    """Fake URL checker with a fixed answer."""

    reachable: bool = True
    checked: list[str] = field(default_factory=list)

    async def is_reachable(self, url: str) -> bool:
        self.checked.append(url)
        return self.reachable


@dataclass
class InMemoryImageStore(LocalImageStore):
    """In-memory local image cache for tests."""

    scopes: dict[UUID | None, dict[str, str]] = field(default_factory=dict)

    def load(self, user_id: UUID | None) -> dict[str, str]:
        return dict(self.scopes.get(user_id, {}))

    def save(self, user_id: UUID | None, images: dict[str, str]) -> None:
        self.scopes[user_id] = dict(images)


@dataclass
class FakeAuthClient(AuthClient):
    """Fake identity provider with one known token."""

    users: dict[str, AuthenticatedUser] = field(
        default_factory=lambda: {
            ACCESS_TOKEN: AuthenticatedUser(id=USER_ID, email="user@example.com")
        }
    )
    sign_in_error: AuthProviderError | None = None
    sign_up_error: AuthProviderError | None = None
    confirm_email: bool = True
    sign_ups: list[tuple[str, str]] = field(default_factory=list)

    def get_user(self, access_token: str) -> AuthenticatedUser | None:
        return self.users.get(access_token)

    def sign_in(self, email: str, password: str) -> AuthSession:
        if self.sign_in_error:
            raise self.sign_in_error
        return AuthSession(
            user=AuthenticatedUser(id=USER_ID, email=email),
            access_token=ACCESS_TOKEN,
        )

    def sign_up(self, email: str, password: str, redirect_to: str) -> AuthSession:
        if self.sign_up_error:
            raise self.sign_up_error
        self.sign_ups.append((email, redirect_to))
        return AuthSession(
            user=AuthenticatedUser(id=uuid4(), email=email),
            access_token=None if self.confirm_email else "new-token",
        )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service.payload.signature",
        supabase_anon_key="header.payload.signature",
    )


@pytest.fixture
def drink_repository() -> InMemoryDrinkRepository:
    return InMemoryDrinkRepository()


@pytest.fixture
def image_repository() -> InMemoryCanImageRepository:
    return InMemoryCanImageRepository()


@pytest.fixture
def object_storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def url_checker() -> FakeUrlChecker:
    return FakeUrlChecker()


@pytest.fixture
def local_store() -> InMemoryImageStore:
    return InMemoryImageStore()


@pytest.fixture
def image_service(
    image_repository: InMemoryCanImageRepository,
    object_storage: FakeObjectStorage,
    url_checker: FakeUrlChecker,
    local_store: InMemoryImageStore,
) -> CanImageService:
    return CanImageService.create(
        repository=image_repository,
        storage=object_storage,
        checker=url_checker,
        local_store=local_store,
    )


@pytest.fixture
def auth_client() -> FakeAuthClient:
    return FakeAuthClient()


@pytest.fixture
def container(
    settings: Settings,
    drink_repository: InMemoryDrinkRepository,
    image_service: CanImageService,
    auth_client: FakeAuthClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        auth_service=AuthService(auth_client),
        drink_service=DrinkService(drink_repository),
        image_service=image_service,
        library_service=LibraryService(
            drink_repository=drink_repository,
            image_service=image_service,
        ),
        close_resources=close_resources,
    )


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {ACCESS_TOKEN}"}
