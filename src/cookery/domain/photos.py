"""Photo domain model with decode-on-construction validation."""

import base64
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID, uuid4


class PhotoDecodeError(Exception):
    """Raised when photo bytes cannot be decoded into an image."""


class PhotoDecoder(Protocol):
    """Interface for turning encoded image bytes into a renderable image."""

    def decode(self, data: bytes) -> object:
        """Return a decoded image or raise PhotoDecodeError."""


@dataclass(frozen=True)
class Photo:
    """An encoded image together with its decoded handle.

    Instances are only built through ``decode`` or ``from_record`` so the
    handle always comes from bytes that decoded successfully.
    """

    id: UUID
    data: bytes = field(repr=False)
    image: object = field(repr=False, compare=False)

    @classmethod
    def decode(
        cls, data: bytes, decoder: PhotoDecoder, photo_id: UUID | None = None
    ) -> "Photo | None":
        """Build a photo from raw bytes, or return None if they don't decode."""
        try:
            image = decoder.decode(data)
        except PhotoDecodeError:
            return None
        return cls(id=photo_id or uuid4(), data=data, image=image)

    @classmethod
    def from_record(cls, record: dict[str, object], decoder: PhotoDecoder) -> "Photo":
        """Load a stored photo, re-validating its bytes."""
        try:
            photo_id = UUID(str(record["id"]))
            data = base64.b64decode(str(record["data"]), validate=True)
        except (KeyError, ValueError) as exc:
            raise PhotoDecodeError("Malformed photo record") from exc
        return cls.load(photo_id, data, decoder)

    @classmethod
    def load(cls, photo_id: UUID, data: bytes, decoder: PhotoDecoder) -> "Photo":
        """Rebuild a stored photo, raising PhotoDecodeError if it doesn't decode."""
        photo = cls.decode(data, decoder, photo_id=photo_id)
        if photo is None:
            raise PhotoDecodeError(f"Photo {photo_id} does not decode")
        return photo

    def to_record(self) -> dict[str, str]:
        """Serialize as id and bytes only."""
        return {
            "id": str(self.id),
            "data": base64.b64encode(self.data).decode("ascii"),
        }
