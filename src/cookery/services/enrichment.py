"""Concurrent photo enrichment for a whole recipe."""

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Protocol

from cookery.domain.photos import Photo
from cookery.domain.recipes import Recipe, Step
from cookery.services.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class PhotoSource(Protocol):
    """Anything that can produce a photo for a prompt."""

    async def fetch(
        self,
        prompt: str,
        *,
        count: int = 1,
        token: CancellationToken | None = None,
    ) -> Photo | None:
        """Return a photo, or None when none could be produced."""


def presentation_prompt(recipe: Recipe) -> str:
    """Prompt for the plated hero shot of the finished dish."""
    return (
        f"{recipe.name}, made from: {_ingredient_list(recipe)}, "
        "presented nicely on a plate, professional food photography"
    )


def social_prompt(recipe: Recipe) -> str:
    """Prompt for the dish being shared at a table."""
    return (
        f"{recipe.name}, made from: {_ingredient_list(recipe)}, "
        "served at a table with friends sharing the meal, candid photo"
    )


def step_prompt(recipe: Recipe, step: Step) -> str:
    """Prompt for one preparation step."""
    return (
        f"Cooking a recipe {recipe.name}, made from: {_ingredient_list(recipe)}. "
        f"Currently cooking at this step in the recipe: {step.description}"
    )


def _ingredient_list(recipe: Recipe) -> str:
    return ", ".join(item.description for item in recipe.ingredients)


async def _contained(fetch: Awaitable[Photo | None]) -> Photo | None:
    try:
        return await fetch
    except Exception:
        logger.exception("Photo task failed unexpectedly")
        return None


@dataclass
class RecipePhotoOrchestrator:
    """Fans out photo fetches for a recipe and merges the results."""

    photo_source: PhotoSource

    async def enrich(
        self, recipe: Recipe, token: CancellationToken | None = None
    ) -> Recipe:
        """Return a copy of the recipe with freshly generated photos.

        Two recipe-level photos (presentation, then social) replace the
        existing ones when at least one succeeds. Each step gets its
        generated photo as its only photo; steps whose fetch fails keep
        what they had.
        """
        prompts = [presentation_prompt(recipe), social_prompt(recipe)]
        prompts.extend(step_prompt(recipe, step) for step in recipe.steps)
        tasks = [
            asyncio.create_task(
                _contained(self.photo_source.fetch(prompt, token=token))
            )
            for prompt in prompts
        ]
        try:
            results = await asyncio.gather(*tasks)
        except asyncio.CancelledError:
            # gather leaves siblings running when one child is cancelled.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        recipe_photos = [photo for photo in results[:2] if photo is not None]
        step_photos = {
            step.id: photo
            for step, photo in zip(recipe.steps, results[2:], strict=True)
            if photo is not None
        }
        logger.info(
            "Enriched recipe %s: %d/2 recipe photos, %d/%d step photos",
            recipe.id,
            len(recipe_photos),
            len(step_photos),
            len(recipe.steps),
        )
        enriched = recipe.with_step_photos(step_photos)
        if recipe_photos:
            enriched = enriched.with_photos(recipe_photos)
        return enriched
