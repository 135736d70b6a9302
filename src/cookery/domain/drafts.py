"""Draft recipe shape exchanged with the text-generation model."""

from pydantic import BaseModel

from cookery.domain.recipes import Recipe


class RecipeDraft(BaseModel):
    """Flat recipe payload: ids are minted only when lifted to a Recipe."""

    name: str
    about: str
    ingredients: list[str]
    steps: list[str]

    @classmethod
    def seed(cls, name: str, description: str) -> "RecipeDraft":
        """Return the empty draft used to prompt the model."""
        return cls(name=name, about=description, ingredients=[], steps=[])

    def to_recipe(self) -> Recipe:
        """Lift the draft into a recipe with fresh ids and no photos."""
        return Recipe.create(
            name=self.name,
            about=self.about,
            ingredients=self.ingredients,
            steps=self.steps,
        )
