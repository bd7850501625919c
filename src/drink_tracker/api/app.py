"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime
from uuid import UUID
from zoneinfo import ZoneInfo

from fastapi import Depends, FastAPI, File, Form, Header, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from drink_tracker.api.drink_models import DrinkCreate, DrinkUpdate
from drink_tracker.app_logging import configure_logging
from drink_tracker.containers import AppContainer
from drink_tracker.domain.auth import AuthenticatedUser, FormResult
from drink_tracker.domain.drinks import DRINK_SERIES, Drink, DrinkFilters
from drink_tracker.domain.errors import (
    AuthenticationError,
    DataAccessError,
    DrinkNotFoundError,
    ImageReadError,
)
from drink_tracker.domain.library import ImageFile
from drink_tracker.services.charts import build_dashboard
from drink_tracker.services.drinks import compute_stats


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    display_tz = ZoneInfo(container.settings.display_timezone)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(AuthenticationError)
    async def authentication_error(
        request: Request, exc: AuthenticationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED, content={"error": str(exc)}
        )

    @app.exception_handler(DrinkNotFoundError)
    async def not_found_error(
        request: Request, exc: DrinkNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"error": str(exc)}
        )

    @app.exception_handler(DataAccessError)
    async def data_access_error(request: Request, exc: DataAccessError) -> JSONResponse:
        logger.error("Data access failed: %s", exc, extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY, content={"error": str(exc)}
        )

    @app.exception_handler(ImageReadError)
    async def image_read_error(request: Request, exc: ImageReadError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        message = first.get("msg", "Invalid input")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": f"{field}: {message}" if field else message,
                "input": _jsonable(exc.body),
            },
        )

    async def current_user(
        request: Request, authorization: str | None = Header(default=None)
    ) -> AuthenticatedUser:
        state_container: AppContainer = request.app.state.container
        return state_container.auth_service.get_current_user(
            _bearer_token(authorization)
        )

    async def optional_user(
        request: Request, authorization: str | None = Header(default=None)
    ) -> AuthenticatedUser | None:
        state_container: AppContainer = request.app.state.container
        try:
            return state_container.auth_service.get_current_user(
                _bearer_token(authorization)
            )
        except AuthenticationError:
            return None

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/auth/login")
    async def login(
        request: Request,
        email: str | None = Form(default=None),
        password: str | None = Form(default=None),
    ) -> JSONResponse:
        """Sign in with the login form."""
        state_container: AppContainer = request.app.state.container
        result = state_container.auth_service.login(email, password)
        return _form_response(result, redirect_to="/")

    @app.post("/auth/signup")
    async def signup(
        request: Request,
        email: str | None = Form(default=None),
        password: str | None = Form(default=None),
        confirm_password: str | None = Form(default=None, alias="confirmPassword"),
    ) -> JSONResponse:
        """Register with the signup form."""
        state_container: AppContainer = request.app.state.container
        redirect_to = f"{str(request.base_url).rstrip('/')}/auth/callback"
        result = state_container.auth_service.signup(
            email, password, confirm_password, redirect_to
        )
        return _form_response(result)

    @app.get("/drinks")
    async def list_drinks(  # noqa: PLR0913
        request: Request,
        search: str | None = None,
        series: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
        limit: int = 50,
        offset: int = 0,
        user: AuthenticatedUser = Depends(current_user),
    ) -> dict[str, object]:
        """Return a page of drinks."""
        if series is not None and series not in DRINK_SERIES:
            return _unknown_series(series)
        state_container: AppContainer = request.app.state.container
        filters = DrinkFilters(
            search=search, series=series, date_from=date_from, date_to=date_to
        )
        drinks = state_container.drink_service.list_drinks(
            user.id, filters, limit, offset
        )
        return {"drinks": [_serialize_drink(drink) for drink in drinks]}

    @app.get("/drinks/recent")
    async def recent_drinks(
        request: Request,
        limit: int = 5,
        user: AuthenticatedUser = Depends(current_user),
    ) -> dict[str, object]:
        """Return the most recently logged drinks."""
        state_container: AppContainer = request.app.state.container
        drinks = state_container.drink_service.get_recent_drinks(user.id, limit)
        return {"drinks": [_serialize_drink(drink) for drink in drinks]}

    @app.get("/drinks/{drink_id}")
    async def get_drink(
        drink_id: UUID,
        request: Request,
        user: AuthenticatedUser = Depends(current_user),
    ) -> dict[str, object]:
        """Return a single drink."""
        state_container: AppContainer = request.app.state.container
        drink = state_container.drink_service.get_drink(user.id, drink_id)
        return _serialize_drink(drink)

    @app.post("/drinks", status_code=status.HTTP_201_CREATED)
    async def create_drink(
        payload: DrinkCreate,
        request: Request,
        user: AuthenticatedUser = Depends(current_user),
    ) -> dict[str, object]:
        """Log a new drink."""
        state_container: AppContainer = request.app.state.container
        drink = state_container.drink_service.create_drink(
            user.id, payload.to_payload()
        )
        logger.info("Drink created", extra={"user_id": str(user.id)})
        return _serialize_drink(drink)

    @app.patch("/drinks/{drink_id}")
    async def update_drink(
        drink_id: UUID,
        payload: DrinkUpdate,
        request: Request,
        user: AuthenticatedUser = Depends(current_user),
    ) -> dict[str, object]:
        """Edit an existing drink."""
        state_container: AppContainer = request.app.state.container
        drink = state_container.drink_service.update_drink(
            user.id, drink_id, payload.to_payload()
        )
        return _serialize_drink(drink)

    @app.delete("/drinks/{drink_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_drink(
        drink_id: UUID,
        request: Request,
        user: AuthenticatedUser = Depends(current_user),
    ) -> Response:
        """Delete a drink."""
        state_container: AppContainer = request.app.state.container
        state_container.drink_service.delete_drink(user.id, drink_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/stats")
    async def stats(
        request: Request, user: AuthenticatedUser = Depends(current_user)
    ) -> dict[str, object]:
        """Return spend, count and average rating over every drink."""
        state_container: AppContainer = request.app.state.container
        drinks = _load_dashboard_drinks(state_container, user.id, logger)
        return asdict(compute_stats(drinks))

    @app.get("/charts")
    async def charts(
        request: Request, user: AuthenticatedUser = Depends(current_user)
    ) -> dict[str, object]:
        """Return stats and every chart for the dashboard."""
        state_container: AppContainer = request.app.state.container
        drinks = _load_dashboard_drinks(state_container, user.id, logger)
        return asdict(build_dashboard(drinks, display_tz))

    @app.get("/library")
    async def library(
        request: Request, user: AuthenticatedUser = Depends(current_user)
    ) -> dict[str, object]:
        """Return the can library."""
        state_container: AppContainer = request.app.state.container
        items = state_container.library_service.get_can_library(user.id)
        return {"items": [asdict(item) for item in items]}

    @app.get("/library/can-types")
    async def can_types(
        request: Request, user: AuthenticatedUser = Depends(current_user)
    ) -> dict[str, object]:
        """Return distinct cans the user has logged."""
        state_container: AppContainer = request.app.state.container
        cans = state_container.library_service.get_existing_can_types(user.id)
        return {"can_types": [asdict(can) for can in cans]}

    @app.post("/library/images")
    async def add_can_image(
        request: Request,
        name: str = Form(...),
        series: str = Form(...),
        file: UploadFile = File(...),
        user: AuthenticatedUser | None = Depends(optional_user),
    ) -> dict[str, object]:
        """Store a photo for a can."""
        if series not in DRINK_SERIES:
            return _unknown_series(series)
        state_container: AppContainer = request.app.state.container
        try:
            content = await file.read()
        except OSError as exc:
            raise ImageReadError("Failed to read image file") from exc
        image = ImageFile(
            filename=file.filename or "image",
            content=content,
            content_type=file.content_type,
        )
        url = await state_container.image_service.add_can_image(
            user.id if user else None, name, series, image
        )
        return {"image_url": url}

    @app.delete("/library/images", status_code=status.HTTP_204_NO_CONTENT)
    async def remove_can_image(
        name: str,
        series: str,
        request: Request,
        user: AuthenticatedUser = Depends(current_user),
    ) -> Response:
        """Remove the photo for a can."""
        state_container: AppContainer = request.app.state.container
        state_container.image_service.remove_can_image(user.id, name, series)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def _unknown_series(series: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": f"Unknown series: {series}", "input": series},
    )


def _load_dashboard_drinks(
    container: AppContainer, user_id: UUID, logger: logging.Logger
) -> list[Drink]:
    """Fetch drinks for a dashboard, degrading to empty on failure."""
    try:
        return container.drink_service.list_all_drinks(user_id)
    except DataAccessError:
        logger.exception(
            "Failed to load drinks for dashboard", extra={"user_id": str(user_id)}
        )
        return []


def _form_response(result: FormResult, redirect_to: str | None = None) -> JSONResponse:
    content: dict[str, object] = {
        "success": result.success,
        "email": result.email,
    }
    if result.error:
        content["error"] = result.error
    if result.message:
        content["message"] = result.message
    if result.success:
        content["requires_confirmation"] = result.requires_confirmation
        if result.access_token:
            content["access_token"] = result.access_token
        if redirect_to:
            content["redirect_to"] = redirect_to
    return JSONResponse(status_code=result.status_code, content=content)


def _serialize_drink(drink: Drink) -> dict[str, object]:
    return {
        "id": str(drink.id),
        "user_id": str(drink.user_id),
        "created_at": drink.created_at.isoformat(),
        "name": drink.name,
        "series": drink.series,
        "volume_ml": drink.volume_ml,
        "cost": drink.cost,
        "rating": drink.rating,
        "notes": drink.notes,
    }


def _jsonable(body: object) -> object:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    if isinstance(body, dict | list | str | int | float | bool) or body is None:
        return body
    return str(body)
