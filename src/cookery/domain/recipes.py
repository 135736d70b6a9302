"""Recipe domain models."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from uuid import UUID, uuid4

from cookery.domain.photos import Photo


def _ensure_unique(kind: str, ids: Iterable[UUID]) -> None:
    seen: set[UUID] = set()
    for item_id in ids:
        if item_id in seen:
            raise ValueError(f"Duplicate {kind} id: {item_id}")
        seen.add(item_id)


@dataclass(frozen=True)
class Ingredient:
    """Single ingredient line."""

    id: UUID
    description: str


@dataclass(frozen=True)
class Step:
    """Preparation step with its own photos."""

    id: UUID
    description: str
    photos: tuple[Photo, ...] = ()

    def __post_init__(self) -> None:
        _ensure_unique("photo", (photo.id for photo in self.photos))


@dataclass(frozen=True)
class Recipe:
    """Immutable recipe snapshot.

    Ingredients, steps and photos keep their order and are keyed by id.
    """

    id: UUID
    name: str = ""
    about: str = ""
    ingredients: tuple[Ingredient, ...] = ()
    steps: tuple[Step, ...] = ()
    photos: tuple[Photo, ...] = ()

    def __post_init__(self) -> None:
        _ensure_unique("ingredient", (item.id for item in self.ingredients))
        _ensure_unique("step", (step.id for step in self.steps))
        _ensure_unique("photo", (photo.id for photo in self.photos))

    @classmethod
    def create(
        cls,
        name: str,
        about: str = "",
        ingredients: Iterable[str] = (),
        steps: Iterable[str] = (),
    ) -> "Recipe":
        """Create a recipe from plain text, minting fresh ids."""
        return cls(
            id=uuid4(),
            name=name,
            about=about,
            ingredients=tuple(
                Ingredient(id=uuid4(), description=text) for text in ingredients
            ),
            steps=tuple(Step(id=uuid4(), description=text) for text in steps),
        )

    def step(self, step_id: UUID) -> Step | None:
        """Return the step with the given id, if present."""
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    def with_photos(self, photos: Iterable[Photo]) -> "Recipe":
        """Return a copy whose recipe-level photos are replaced."""
        return replace(self, photos=tuple(photos))

    def with_step_photos(self, step_photos: Mapping[UUID, Photo]) -> "Recipe":
        """Return a copy where each mapped step gets that photo as its only one."""
        if not step_photos:
            return self
        steps = tuple(
            replace(step, photos=(step_photos[step.id],))
            if step.id in step_photos
            else step
            for step in self.steps
        )
        return replace(self, steps=steps)
