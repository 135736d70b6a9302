"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import FastAPI, HTTPException, Request, status

from cookery.api.recipe_models import (
    GenerateRecipeRequest,
    RecipeListResponse,
    RecipePayload,
)
from cookery.app_logging import configure_logging
from cookery.containers import AppContainer
from cookery.domain.photos import PhotoDecodeError
from cookery.domain.recipes import Recipe
from cookery.services.coordinator import GENERATE_RECIPE_SCOPE, recipe_scope


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/recipes")
    async def list_recipes(request: Request) -> RecipeListResponse:
        """Return all recipes and the one navigation last moved to."""
        state_container: AppContainer = request.app.state.container
        book = state_container.recipe_book
        return RecipeListResponse(
            recipes=[
                RecipePayload.from_recipe(recipe) for recipe in book.list_recipes()
            ],
            focused_recipe_id=book.focused_id,
        )

    @app.get("/recipes/{recipe_id}")
    async def get_recipe(recipe_id: UUID, request: Request) -> RecipePayload:
        """Return a single recipe."""
        state_container: AppContainer = request.app.state.container
        recipe = state_container.recipe_book.get(recipe_id)
        if recipe is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return RecipePayload.from_recipe(recipe)

    @app.post("/recipes", status_code=status.HTTP_201_CREATED)
    async def add_recipe(payload: RecipePayload, request: Request) -> RecipePayload:
        """Store a recipe supplied by the client."""
        state_container: AppContainer = request.app.state.container
        try:
            recipe = payload.to_recipe(state_container.photo_decoder)
        except (PhotoDecodeError, ValueError) as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
            ) from exc
        state_container.recipe_book.add(recipe)
        return RecipePayload.from_recipe(recipe)

    @app.post("/recipes/generate", status_code=status.HTTP_202_ACCEPTED)
    async def generate_recipe(
        body: GenerateRecipeRequest, request: Request
    ) -> dict[str, object]:
        """Start generating a new recipe, replacing any generation in flight."""
        state_container: AppContainer = request.app.state.container
        book = state_container.recipe_book

        def on_failure(exc: Exception) -> None:
            logger.info(
                "Recipe generation for %r did not complete: %s", body.name, exc
            )

        def on_navigate(recipe: Recipe) -> None:
            book.focus(recipe.id)

        state_container.coordinator.generate_recipe(
            GENERATE_RECIPE_SCOPE,
            body.name,
            body.description,
            book.add,
            on_failure=on_failure,
            on_navigate=on_navigate,
        )
        return {"scope": GENERATE_RECIPE_SCOPE, "in_flight": True}

    @app.post("/recipes/{recipe_id}/photos", status_code=status.HTTP_202_ACCEPTED)
    async def generate_photos(recipe_id: UUID, request: Request) -> dict[str, object]:
        """Start generating photos for an existing recipe."""
        state_container: AppContainer = request.app.state.container
        book = state_container.recipe_book
        recipe = book.get(recipe_id)
        if recipe is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        scope = recipe_scope(recipe_id)
        state_container.coordinator.enrich_photos(scope, recipe, book.replace)
        return {"scope": scope, "in_flight": True}

    @app.get("/generations/{scope}")
    async def generation_status(scope: str, request: Request) -> dict[str, object]:
        """Return whether a generation is in flight for the scope."""
        state_container: AppContainer = request.app.state.container
        in_flight = state_container.coordinator.in_flight(scope)
        return {"scope": scope, "in_flight": in_flight}

    @app.delete("/generations/{scope}")
    async def cancel_generation(scope: str, request: Request) -> dict[str, object]:
        """Cancel the generation running for the scope."""
        state_container: AppContainer = request.app.state.container
        cancelled = state_container.coordinator.cancel(scope)
        return {"scope": scope, "cancelled": cancelled}

    return app
