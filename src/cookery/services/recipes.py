"""Recipe text generation via a chat model."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from cookery.domain.drafts import RecipeDraft
from cookery.domain.recipes import Recipe
from cookery.services.cancellation import CancellationToken

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a recipe writer. Given a JSON recipe seed with a name and an "
    "about description, write a complete recipe. Respond with JSON only, "
    'exactly matching {"name": string, "about": string, '
    '"ingredients": [string], "steps": [string]}. Each ingredient is one '
    "line such as a quantity and item. Each step is one instruction."
)


class GenerationFailedError(Exception):
    """Raised when a recipe cannot be generated from the model response."""


class TextGenerationClient(Protocol):
    """Interface for a chat-completion endpoint."""

    async def chat_complete(
        self, *, model: str, messages: list[dict[str, str]]
    ) -> str | bytes | None:
        """Return the assistant message content, if any."""


class RecipeEnricher(Protocol):
    """Interface for adding photos to a freshly generated recipe."""

    async def enrich(
        self, recipe: Recipe, token: CancellationToken | None = None
    ) -> Recipe:
        """Return the recipe with generated photos."""


@dataclass
class RecipeTextGenerator:
    """Generates a full recipe from a name and description, then adds photos."""

    client: TextGenerationClient
    enricher: RecipeEnricher
    model: str

    async def generate(
        self,
        name: str,
        description: str,
        token: CancellationToken | None = None,
    ) -> Recipe:
        """Generate a recipe and return it enriched with photos."""
        seed = _encode_seed(name, description)
        if token:
            token.raise_if_cancelled()
        try:
            content = await self.client.chat_complete(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": seed},
                ],
            )
        except Exception as exc:
            message = f"Text generation request failed: {exc}"
            raise GenerationFailedError(message) from exc
        draft = parse_draft(content)
        recipe = draft.to_recipe()
        logger.info(
            "Generated recipe %s with %d ingredients and %d steps",
            recipe.id,
            len(recipe.ingredients),
            len(recipe.steps),
        )
        return await self.enricher.enrich(recipe, token)


def _encode_seed(name: str, description: str) -> str:
    try:
        seed = RecipeDraft.seed(name, description)
        return seed.model_dump_json().encode("utf-8").decode("utf-8")
    except (ValueError, UnicodeError) as exc:
        raise GenerationFailedError("Could not encode recipe seed") from exc


def parse_draft(content: str | bytes | None) -> RecipeDraft:
    """Parse model output into a draft recipe."""
    if content is None:
        raise GenerationFailedError("Model returned no content")
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise GenerationFailedError("Model content is not valid UTF-8") from exc
    text = _strip_code_fence(content)
    if not text:
        raise GenerationFailedError("Model returned empty content")
    try:
        return RecipeDraft.model_validate_json(text)
    except ValidationError as exc:
        raise GenerationFailedError("Model content is not a recipe draft") from exc


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped
    lines = stripped.splitlines()[1:]
    if lines and lines[-1].strip() == "```":
        lines = lines[:-1]
    return "\n".join(lines).strip()
