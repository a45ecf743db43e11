"""Data models and schemas for Pantry Chef.

Defines Pydantic models for the recipes produced by the generation service,
the encoded image handed to it, the frozen history snapshots and the
presentation state published by the orchestrator.
All models use Pydantic v2; domain objects are frozen so snapshots can be
shared with the presentation layer without copying.
"""

import time
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Recipe(BaseModel):
    """Domain model for a generated recipe.

    Field aliases match the JSON schema requested from the model
    (recipeName, imageUrl). The image is attached after generation with
    with_image(), which returns a copy.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    name: Annotated[str, Field(alias="recipeName", min_length=1, max_length=200, description="Recipe title")]
    description: Annotated[str, Field(default="", max_length=2000, description="One or two enticing sentences")]
    ingredients: Annotated[
        Tuple[str, ...], Field(default=(), max_length=100, description="Ingredients with quantities")
    ]
    instructions: Annotated[
        Tuple[str, ...], Field(default=(), max_length=100, description="Ordered preparation steps")
    ]
    image_url: Annotated[
        Optional[str],
        Field(None, alias="imageUrl", description="data: URI of the generated dish photo, if one was produced"),
    ]

    @field_validator("ingredients", "instructions", mode="before")
    @classmethod
    def drop_blank_lines(cls, value):
        """Strip entries and drop empty ones (models sometimes emit trailing blanks)."""
        if isinstance(value, str):
            value = [value]
        if value is None:
            return ()
        return tuple(item.strip() for item in value if isinstance(item, str) and item.strip())

    @property
    def has_image(self) -> bool:
        return self.image_url is not None

    def with_image(self, image_url: str) -> "Recipe":
        """Return a copy of this recipe illustrated with image_url."""
        return self.model_copy(update={"image_url": image_url})


class EncodedImage(BaseModel):
    """Transport-safe image payload: base-64 data without any data: URI prefix."""

    model_config = ConfigDict(frozen=True)

    data: Annotated[str, Field(min_length=1)]
    mime_type: Annotated[str, Field(pattern=r"^image/[a-z0-9.+-]+$")]

    def as_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


_last_entry_id = 0


def _next_entry_id() -> str:
    """Nanosecond timestamp id, bumped when two entries land on the same tick."""
    global _last_entry_id
    candidate = time.time_ns()
    if candidate <= _last_entry_id:
        candidate = _last_entry_id + 1
    _last_entry_id = candidate
    return str(candidate)


class HistoryEntry(BaseModel):
    """Frozen snapshot of one successful generation run."""

    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: datetime
    ingredients: Tuple[str, ...]
    recipes: Tuple[Recipe, ...]

    @classmethod
    def capture(cls, ingredients: Sequence[str], recipes: Sequence[Recipe]) -> "HistoryEntry":
        """Create an entry for a run that just finished, copying the live sequences."""
        return cls(
            id=_next_entry_id(),
            timestamp=datetime.now(timezone.utc),
            ingredients=tuple(ingredients),
            recipes=tuple(recipes),
        )

    def summary(self) -> str:
        """One-line label for the history panel."""
        local = self.timestamp.astimezone()
        when = f"{local:%Y-%m-%d} - {local:%H:%M:%S}"
        return f"{when} | Ingredients: {', '.join(self.ingredients)}"


class LoadingPhase(str, Enum):
    """User-facing label of the step in progress. Never used for control flow."""

    IDENTIFYING_INGREDIENTS = "Identifying ingredients..."
    GENERATING_RECIPES = "Generating delicious ideas..."
    GENERATING_IMAGES = "Creating beautiful dish photos..."


class AppState(BaseModel):
    """Read-only snapshot of everything the presentation layer renders."""

    model_config = ConfigDict(frozen=True)

    ingredients: Tuple[str, ...] = ()
    recipes: Tuple[Recipe, ...] = ()
    is_loading: bool = False
    loading_phase: Optional[LoadingPhase] = None
    error: Optional[str] = None
    history: Tuple[HistoryEntry, ...] = ()
    is_history_visible: bool = False

    @property
    def loading_message(self) -> str:
        return self.loading_phase.value if self.loading_phase else ""

    @property
    def show_empty_prompt(self) -> bool:
        """True when there is nothing to show yet (no results, no error, not busy)."""
        return not self.is_loading and not self.recipes and self.error is None


class IdentifiedIngredients(BaseModel):
    """Wire schema for the vision model's answer."""

    model_config = ConfigDict(str_strip_whitespace=True)

    ingredients: Annotated[List[str], Field(default_factory=list, max_length=50)]

    @field_validator("ingredients", mode="before")
    @classmethod
    def drop_blank_names(cls, value):
        if value is None:
            return []
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]


class RecipeBatch(BaseModel):
    """Wire schema for the recipe model's answer."""

    recipes: Annotated[List[Recipe], Field(default_factory=list, max_length=10)]
