"""OpenAI Images API client for recipe photos."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from cookery.services.photos import ImageGenerationClient


@dataclass
class OpenAIImageClient(ImageGenerationClient):
    """Image generation client backed by the OpenAI Images API."""

    client: AsyncOpenAI

    async def generate_images(
        self, *, prompt: str, count: int, model: str, quality: str, size: str
    ) -> list[str]:
        """Request images and return their URLs."""
        response = await self.client.images.generate(
            prompt=prompt,
            model=model,
            n=count,
            quality=quality,
            size=size,
            response_format="url",
        )
        return [image.url for image in response.data or [] if image.url]
