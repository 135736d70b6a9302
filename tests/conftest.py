"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from io import BytesIO

import pytest
from PIL import Image

from cookery.adapters.pillow_photo_decoder import PillowPhotoDecoder
from cookery.config import Settings
from cookery.containers import AppContainer
from cookery.domain.photos import Photo
from cookery.domain.recipes import Recipe
from cookery.services.cancellation import CancellationToken
from cookery.services.coordinator import GenerationCoordinator
from cookery.services.enrichment import PhotoSource, RecipePhotoOrchestrator
from cookery.services.photos import (
    ImageDownloader,
    ImageGenerationClient,
    PhotoFetcher,
)
from cookery.services.recipe_book import RecipeBook
from cookery.services.recipes import RecipeTextGenerator, TextGenerationClient


def make_png(color: str = "red") -> bytes:
    """Return a small valid PNG image."""
    buffer = BytesIO()
    Image.new("RGB", (4, 4), color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_oversized_gif() -> bytes:
    """Return a GIF whose header claims a 65535x65535 canvas."""
    buffer = BytesIO()
    Image.new("P", (16, 16)).save(buffer, format="GIF")
    data = bytearray(buffer.getvalue())
    data[6:10] = b"\xff\xff\xff\xff"
    return bytes(data)


def make_photo(color: str = "red") -> Photo:
    photo = Photo.decode(make_png(color), PillowPhotoDecoder())
    assert photo is not None
    return photo


def taco_recipe() -> Recipe:
    return Recipe.create(
        name="Tacos",
        about="Quick weeknight tacos",
        ingredients=["Tortillas", "Beef"],
        steps=["Cook beef", "Assemble"],
    )


TACO_DRAFT = (
    '{"name":"Tacos","about":"Crispy beef tacos",'
    '"ingredients":["Tortillas","Beef"],"steps":["Cook beef","Assemble"]}'
)


@dataclass
class FakeImageClient(ImageGenerationClient):
    """Fake image client returning one URL per prompt."""

    prompts: list[str] = field(default_factory=list)
    urls: list[str] | None = None
    error: Exception | None = None

    async def generate_images(
        self, *, prompt: str, count: int, model: str, quality: str, size: str
    ) -> list[str]:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        if self.urls is not None:
            return self.urls
        return [f"https://images.test/{len(self.prompts)}.png"]


@dataclass
class FakeDownloader(ImageDownloader):
    """Fake downloader serving fixed bytes."""

    content: bytes = field(default_factory=make_png)
    status_code: int = 200
    urls: list[str] = field(default_factory=list)

    async def download(self, url: str) -> tuple[bytes, int]:
        self.urls.append(url)
        return self.content, self.status_code


@dataclass
class FakePhotoSource(PhotoSource):
    """Photo source that fails for prompts containing any marker."""

    fail_markers: tuple[str, ...] = ()
    prompts: list[str] = field(default_factory=list)
    completed: list[str] = field(default_factory=list)
    delays: dict[str, float] = field(default_factory=dict)

    async def fetch(
        self,
        prompt: str,
        *,
        count: int = 1,
        token: CancellationToken | None = None,
    ) -> Photo | None:
        self.prompts.append(prompt)
        for marker, delay in self.delays.items():
            if marker in prompt:
                await asyncio.sleep(delay)
        await asyncio.sleep(0)
        self.completed.append(prompt)
        if any(marker in prompt for marker in self.fail_markers):
            return None
        return make_photo()


@dataclass
class FakeTextClient(TextGenerationClient):
    """Fake chat client returning fixed content."""

    content: str | bytes | None = TACO_DRAFT
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def chat_complete(
        self, *, model: str, messages: list[dict[str, str]]
    ) -> str | bytes | None:
        self.calls.append({"model": model, "messages": messages})
        if self.error:
            raise self.error
        return self.content


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="openai-key")


@pytest.fixture
def decoder() -> PillowPhotoDecoder:
    return PillowPhotoDecoder()


@pytest.fixture
def photo_source() -> FakePhotoSource:
    return FakePhotoSource()


@pytest.fixture
def text_client() -> FakeTextClient:
    return FakeTextClient()


@pytest.fixture
def container(
    settings: Settings,
    decoder: PillowPhotoDecoder,
    photo_source: FakePhotoSource,
    text_client: FakeTextClient,
) -> AppContainer:
    photo_fetcher = PhotoFetcher(
        image_client=FakeImageClient(),
        downloader=FakeDownloader(),
        decoder=decoder,
        model=settings.image_model,
        quality=settings.image_quality,
        size=settings.image_size,
    )
    orchestrator = RecipePhotoOrchestrator(photo_source=photo_source)
    generator = RecipeTextGenerator(
        client=text_client, enricher=orchestrator, model=settings.text_model
    )
    coordinator = GenerationCoordinator(
        orchestrator=orchestrator,
        generator=generator,
        navigation_delay_seconds=0,
    )

    async def close_resources() -> None:
        await coordinator.aclose()

    return AppContainer(
        settings=settings,
        photo_decoder=decoder,
        photo_fetcher=photo_fetcher,
        photo_orchestrator=orchestrator,
        recipe_generator=generator,
        coordinator=coordinator,
        recipe_book=RecipeBook(),
        close_resources=close_resources,
    )
