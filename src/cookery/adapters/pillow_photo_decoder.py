"""Pillow-based photo decoder."""

from io import BytesIO

from PIL import Image

from cookery.domain.photos import PhotoDecodeError, PhotoDecoder

# UnidentifiedImageError and truncated-file errors are OSErrors; some plugins
# raise the others on malformed headers. DecompressionBombError is a plain
# Exception raised for headers claiming oversized dimensions.
_DECODE_ERRORS = (
    OSError,
    EOFError,
    SyntaxError,
    ValueError,
    Image.DecompressionBombError,
)


class PillowPhotoDecoder(PhotoDecoder):
    """Decodes image bytes into a fully loaded PIL image."""

    def decode(self, data: bytes) -> Image.Image:
        """Decode the bytes or raise PhotoDecodeError."""
        if not data:
            raise PhotoDecodeError("Empty image data")
        try:
            image = Image.open(BytesIO(data))
            image.load()
        except _DECODE_ERRORS as exc:
            raise PhotoDecodeError(str(exc)) from exc
        return image
