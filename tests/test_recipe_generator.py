"""Tests for recipe text generation."""

import asyncio

import openai
import pytest

from cookery.services.enrichment import RecipePhotoOrchestrator
from cookery.services.recipes import (
    GenerationFailedError,
    RecipeTextGenerator,
    parse_draft,
)
from tests.conftest import TACO_DRAFT, FakePhotoSource, FakeTextClient


def _generator(text_client, photo_source) -> RecipeTextGenerator:
    return RecipeTextGenerator(
        client=text_client,
        enricher=RecipePhotoOrchestrator(photo_source),
        model="gpt-4o-mini",
    )


def test_generate_builds_and_enriches_recipe() -> None:
    source = FakePhotoSource()
    text_client = FakeTextClient()

    recipe = asyncio.run(
        _generator(text_client, source).generate("Tacos", "Quick weeknight tacos")
    )

    assert recipe.name == "Tacos"
    assert [item.description for item in recipe.ingredients] == ["Tortillas", "Beef"]
    assert [step.description for step in recipe.steps] == ["Cook beef", "Assemble"]
    assert len({step.id for step in recipe.steps}) == 2
    assert len(recipe.photos) == 2
    assert all(len(step.photos) == 1 for step in recipe.steps)
    assert len(source.prompts) == 4


def test_generate_sends_seed_to_model() -> None:
    text_client = FakeTextClient()

    asyncio.run(
        _generator(text_client, FakePhotoSource()).generate(
            "Tacos", "Quick weeknight tacos"
        )
    )

    call = text_client.calls[0]
    assert call["model"] == "gpt-4o-mini"
    user_message = call["messages"][-1]
    assert user_message["role"] == "user"
    assert '"about":"Quick weeknight tacos"' in user_message["content"]
    assert '"ingredients":[]' in user_message["content"]


def test_generate_hands_fresh_recipe_to_enricher() -> None:
    seen = []

    class _Enricher:
        async def enrich(self, recipe, token=None):
            seen.append(recipe)
            return recipe

    generator = RecipeTextGenerator(
        client=FakeTextClient(), enricher=_Enricher(), model="gpt-4o-mini"
    )

    recipe = asyncio.run(generator.generate("Tacos", "Quick weeknight tacos"))

    assert seen == [recipe]
    assert len(recipe.ingredients) == 2
    assert len(recipe.steps) == 2
    assert all(step.photos == () for step in recipe.steps)


@pytest.mark.parametrize(
    "content",
    [
        None,
        "",
        "Sure! Here is a recipe for tacos.",
        '{"name": "Tacos"}',
        '{"name":"Tacos","about":"x","ingredients":"Beef","steps":[]}',
        b"\xff\xfe\xfa",
    ],
)
def test_generate_fails_without_fetching_photos(content) -> None:
    source = FakePhotoSource()

    with pytest.raises(GenerationFailedError):
        asyncio.run(
            _generator(FakeTextClient(content=content), source).generate(
                "Tacos", "Quick weeknight tacos"
            )
        )

    assert source.prompts == []


def test_generate_wraps_transport_errors() -> None:
    client = FakeTextClient(error=openai.OpenAIError("down"))

    with pytest.raises(GenerationFailedError):
        asyncio.run(_generator(client, FakePhotoSource()).generate("Tacos", ""))


def test_parse_draft_accepts_code_fence() -> None:
    draft = parse_draft(f"```json\n{TACO_DRAFT}\n```")

    assert draft.steps == ["Cook beef", "Assemble"]


def test_parse_draft_accepts_utf8_bytes() -> None:
    draft = parse_draft(TACO_DRAFT.encode("utf-8"))

    assert draft.ingredients == ["Tortillas", "Beef"]
