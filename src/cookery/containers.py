"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from openai import AsyncOpenAI

from cookery.adapters.image_downloader import HttpxImageDownloader
from cookery.adapters.openai_chat_client import OpenAIChatClient
from cookery.adapters.openai_image_client import OpenAIImageClient
from cookery.adapters.pillow_photo_decoder import PillowPhotoDecoder
from cookery.config import Settings
from cookery.domain.photos import PhotoDecoder
from cookery.services.coordinator import GenerationCoordinator
from cookery.services.enrichment import RecipePhotoOrchestrator
from cookery.services.photos import PhotoFetcher
from cookery.services.recipe_book import RecipeBook
from cookery.services.recipes import RecipeTextGenerator


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    photo_decoder: PhotoDecoder
    photo_fetcher: PhotoFetcher
    photo_orchestrator: RecipePhotoOrchestrator
    recipe_generator: RecipeTextGenerator
    coordinator: GenerationCoordinator
    recipe_book: RecipeBook
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    openai_client = AsyncOpenAI(api_key=resolved_settings.openai_api_key)
    image_client = OpenAIImageClient(client=openai_client)
    chat_client = OpenAIChatClient(client=openai_client)
    downloader = HttpxImageDownloader.create(
        timeout=resolved_settings.download_timeout_seconds
    )
    decoder = PillowPhotoDecoder()
    photo_fetcher = PhotoFetcher(
        image_client=image_client,
        downloader=downloader,
        decoder=decoder,
        model=resolved_settings.image_model,
        quality=resolved_settings.image_quality,
        size=resolved_settings.image_size,
    )
    orchestrator = RecipePhotoOrchestrator(photo_source=photo_fetcher)
    generator = RecipeTextGenerator(
        client=chat_client,
        enricher=orchestrator,
        model=resolved_settings.text_model,
    )
    coordinator = GenerationCoordinator(
        orchestrator=orchestrator,
        generator=generator,
        navigation_delay_seconds=resolved_settings.navigation_delay_seconds,
    )

    async def close_resources() -> None:
        await coordinator.aclose()
        await downloader.close()
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        photo_decoder=decoder,
        photo_fetcher=photo_fetcher,
        photo_orchestrator=orchestrator,
        recipe_generator=generator,
        coordinator=coordinator,
        recipe_book=RecipeBook(),
        close_resources=close_resources,
    )
