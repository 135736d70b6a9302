"""In-memory recipe collection shared by the API handlers."""

from dataclasses import dataclass, field
from uuid import UUID

from cookery.domain.recipes import Recipe


@dataclass
class RecipeBook:
    """Ordered recipes keyed by id, plus the recipe navigation last moved to."""

    _recipes: dict[UUID, Recipe] = field(default_factory=dict, init=False)
    focused_id: UUID | None = None

    def list_recipes(self) -> list[Recipe]:
        """Return recipes in insertion order."""
        return list(self._recipes.values())

    def get(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe by id, if present."""
        return self._recipes.get(recipe_id)

    def add(self, recipe: Recipe) -> None:
        """Append a recipe, or replace it in place if the id already exists."""
        self._recipes[recipe.id] = recipe

    def replace(self, recipe: Recipe) -> bool:
        """Swap in a new value for an existing recipe; False if it's gone."""
        if recipe.id not in self._recipes:
            return False
        self._recipes[recipe.id] = recipe
        return True

    def focus(self, recipe_id: UUID) -> None:
        """Record the recipe the client should navigate to."""
        if recipe_id in self._recipes:
            self.focused_id = recipe_id
