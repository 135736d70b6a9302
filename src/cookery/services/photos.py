"""Single-image generation and download."""

import logging
from dataclasses import dataclass
from typing import Protocol

from cookery.domain.photos import Photo, PhotoDecoder
from cookery.services.cancellation import CancellationToken

logger = logging.getLogger(__name__)

HTTP_OK = 200


class ImageGenerationClient(Protocol):
    """Interface for an image-generation endpoint."""

    async def generate_images(
        self, *, prompt: str, count: int, model: str, quality: str, size: str
    ) -> list[str]:
        """Return URLs of the generated images."""


class ImageDownloader(Protocol):
    """Interface for downloading arbitrary image URLs."""

    async def download(self, url: str) -> tuple[bytes, int]:
        """Return the response body and HTTP status code."""


@dataclass
class PhotoFetcher:
    """Generates one image for a prompt and turns it into a Photo.

    Every expected failure resolves to None; there are no retries.
    """

    image_client: ImageGenerationClient
    downloader: ImageDownloader
    decoder: PhotoDecoder
    model: str
    quality: str
    size: str

    async def fetch(
        self,
        prompt: str,
        *,
        count: int = 1,
        token: CancellationToken | None = None,
    ) -> Photo | None:
        """Generate, download and decode a photo for the prompt."""
        try:
            return await self._fetch(prompt, count, token)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Photo fetch failed: %s", exc)
            return None

    async def _fetch(
        self, prompt: str, count: int, token: CancellationToken | None
    ) -> Photo | None:
        if token:
            token.raise_if_cancelled()
        urls = await self.image_client.generate_images(
            prompt=prompt,
            count=count,
            model=self.model,
            quality=self.quality,
            size=self.size,
        )
        if not urls:
            logger.warning("Image generation returned no results")
            return None
        if token:
            token.raise_if_cancelled()
        data, status_code = await self.downloader.download(urls[0])
        if status_code != HTTP_OK:
            logger.warning("Image download returned status %s", status_code)
            return None
        photo = Photo.decode(data, self.decoder)
        if photo is None:
            logger.warning("Downloaded image could not be decoded")
        return photo
