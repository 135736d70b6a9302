"""Pydantic models for recipe API payloads."""

from uuid import UUID

from pydantic import Base64Bytes, BaseModel, Field

from cookery.domain.photos import Photo, PhotoDecoder
from cookery.domain.recipes import Ingredient, Recipe, Step


class PhotoPayload(BaseModel):
    """Photo payload carrying base64-encoded image bytes."""

    id: UUID
    data: Base64Bytes


class IngredientPayload(BaseModel):
    """Ingredient payload."""

    id: UUID
    description: str


class StepPayload(BaseModel):
    """Step payload."""

    id: UUID
    description: str
    photos: list[PhotoPayload] = Field(default_factory=list)


class RecipePayload(BaseModel):
    """Full recipe payload."""

    id: UUID
    name: str = ""
    about: str = ""
    ingredients: list[IngredientPayload] = Field(default_factory=list)
    steps: list[StepPayload] = Field(default_factory=list)
    photos: list[PhotoPayload] = Field(default_factory=list)

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> "RecipePayload":
        """Build a payload from a domain recipe."""
        return cls.model_validate(
            {
                "id": recipe.id,
                "name": recipe.name,
                "about": recipe.about,
                "ingredients": [
                    {"id": item.id, "description": item.description}
                    for item in recipe.ingredients
                ],
                "steps": [
                    {
                        "id": step.id,
                        "description": step.description,
                        "photos": [photo.to_record() for photo in step.photos],
                    }
                    for step in recipe.steps
                ],
                "photos": [photo.to_record() for photo in recipe.photos],
            }
        )

    def to_recipe(self, decoder: PhotoDecoder) -> Recipe:
        """Build a domain recipe, re-decoding every photo.

        Raises PhotoDecodeError for undecodable photos and ValueError for
        duplicate ids.
        """
        return Recipe(
            id=self.id,
            name=self.name,
            about=self.about,
            ingredients=tuple(
                Ingredient(id=item.id, description=item.description)
                for item in self.ingredients
            ),
            steps=tuple(
                Step(
                    id=step.id,
                    description=step.description,
                    photos=_decode_photos(step.photos, decoder),
                )
                for step in self.steps
            ),
            photos=_decode_photos(self.photos, decoder),
        )


class GenerateRecipeRequest(BaseModel):
    """Request to generate a new recipe."""

    name: str = Field(min_length=1)
    description: str = ""


def _decode_photos(
    payloads: list[PhotoPayload], decoder: PhotoDecoder
) -> tuple[Photo, ...]:
    return tuple(
        Photo.load(payload.id, payload.data, decoder) for payload in payloads
    )


class RecipeListResponse(BaseModel):
    """All recipes plus the one navigation last moved to."""

    recipes: list[RecipePayload]
    focused_recipe_id: UUID | None = None
