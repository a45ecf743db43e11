"""Contract of the generative backend consumed by the orchestrator.

Any object with these three coroutine methods can drive the pipeline;
GeminiGenerationService is the production implementation. Every call may
fail independently, preferably with ServiceError.
"""

from typing import List, Protocol, Sequence, runtime_checkable

from pantry_chef.models.models import Recipe


@runtime_checkable
class GenerationService(Protocol):
    async def identify_ingredients(self, encoded_image: str, mime_type: str) -> List[str]:
        """Return the ingredient names visible in a base-64 encoded image."""
        ...

    async def generate_recipes(self, ingredients: Sequence[str]) -> List[Recipe]:
        """Return recipes (without images) built around the given ingredients."""
        ...

    async def generate_image(self, recipe: Recipe) -> str:
        """Return a data: URI of an illustrative photo for one recipe."""
        ...
