"""Generation workflows: photo -> ingredients, ingredients -> illustrated recipes.

The orchestrator owns the live session state (ingredient set, current
recipes, loading phase, error message, history panel visibility) and the
history ledger. Front ends send it commands and observe it through
immutable AppState snapshots, either by reading `state` or by subscribing.

Workflows:

1. generate_from_ingredients() / generate():
   recipes (one awaited call) -> one image per recipe, issued concurrently
   and settled together -> merge by position -> history entry
2. identify_from_image() / upload_image():
   encode file -> identify ingredients -> merge into the ingredient set
3. recall_history() / select_history():
   synchronous replacement of ingredients and recipes by a snapshot

Failures are caught here and turned into one user-visible message; a
recipe whose image failed is kept without an image and is not an error.
The loading flag is cleared on every path.

Each workflow takes a request id when it starts. Results that arrive after
a newer workflow (or a history recall) has started are discarded, so two
overlapping clicks on "generate" can never interleave their effects.
"""

import asyncio
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Sequence, Tuple

from pantry_chef.errors import UNKNOWN_ERROR_MESSAGE, UNKNOWN_IMAGE_ERROR_MESSAGE, describe_error
from pantry_chef.models.models import AppState, EncodedImage, HistoryEntry, LoadingPhase, Recipe
from pantry_chef.pipeline.history import HistoryLedger
from pantry_chef.pipeline.ingredients import IngredientSet
from pantry_chef.services.generation import GenerationService
from pantry_chef.services.image_codec import encode_image
from pantry_chef.utils.logger import logger

Subscriber = Callable[[AppState], None]
ImageEncoder = Callable[[Any, Optional[str]], Awaitable[EncodedImage]]


class GenerationOrchestrator:
    """Drives the generation workflows and publishes state snapshots.

    Args:
        service: Backend used for identification, recipes and images.
        ingredients: Initial ingredient names.
        history: Ledger to record runs in (a new one by default).
        encoder: Coroutine turning an image file into an EncodedImage.
    """

    def __init__(
        self,
        service: GenerationService,
        ingredients: Iterable[str] = (),
        history: Optional[HistoryLedger] = None,
        encoder: ImageEncoder = encode_image,
    ) -> None:
        self.service = service
        self.ingredients = IngredientSet(ingredients)
        self.history = history if history is not None else HistoryLedger()
        self._encode = encoder
        self._recipes: Tuple[Recipe, ...] = ()
        self._loading_phase: Optional[LoadingPhase] = None
        self._error: Optional[str] = None
        self._history_visible = False
        self._request_id = 0
        self._subscribers: List[Subscriber] = []

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def state(self) -> AppState:
        return AppState(
            ingredients=self.ingredients.snapshot(),
            recipes=self._recipes,
            is_loading=self._loading_phase is not None,
            loading_phase=self._loading_phase,
            error=self._error,
            history=self.history.entries(),
            is_history_visible=self._history_visible,
        )

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call callback with a fresh snapshot after every state change.

        Returns:
            A function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        if not self._subscribers:
            return
        snapshot = self.state
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception(f"State subscriber {callback!r} failed")

    # ------------------------------------------------------------------
    # Synchronous commands
    # ------------------------------------------------------------------

    def add_ingredient(self, name: str) -> bool:
        added = self.ingredients.add(name)
        if added:
            self._notify()
        return added

    def remove_ingredient(self, index: int) -> Optional[str]:
        removed = self.ingredients.remove_at(index)
        if removed is not None:
            self._notify()
        return removed

    def show_history(self) -> None:
        self._history_visible = True
        self._notify()

    def close_history(self) -> None:
        self._history_visible = False
        self._notify()

    def find_history(self, entry_id: str) -> Optional[HistoryEntry]:
        return self.history.get(entry_id)

    def recall_history(self, entry: HistoryEntry) -> None:
        """Replace ingredients and recipes with a history snapshot.

        Any workflow still in flight is superseded: its results will be dropped.
        """
        self._request_id += 1
        self._loading_phase = None
        self.ingredients.replace(entry.ingredients)
        self._recipes = entry.recipes
        self._error = None
        self._history_visible = False
        logger.info(f"Recalled history entry {entry.id} ({len(entry.recipes)} recipe(s))")
        self._notify()

    select_history = recall_history

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------

    async def generate(self) -> Optional[List[Recipe]]:
        """Generate recipes for the current ingredient set."""
        return await self.generate_from_ingredients(self.ingredients.snapshot())

    async def generate_from_ingredients(self, ingredients: Sequence[str]) -> Optional[List[Recipe]]:
        """Generate illustrated recipes and record the run in history.

        Does nothing when ingredients is empty.

        Returns:
            The recipes with whatever images succeeded, or None if the run was
            skipped, failed, or superseded by a newer workflow.
        """
        ingredients = tuple(ingredients)
        if not ingredients:
            logger.debug("Generate requested with no ingredients, ignoring")
            return None

        request_id = self._begin(LoadingPhase.GENERATING_RECIPES)
        logger.info(
            f"Generating recipes for: {', '.join(ingredients)}",
            extra={"request_id": request_id, "phase": LoadingPhase.GENERATING_RECIPES.name},
        )
        try:
            recipes = await self.service.generate_recipes(list(ingredients))
            if not self._is_current(request_id):
                return None

            self._set_phase(LoadingPhase.GENERATING_IMAGES)
            logger.info(
                f"Requesting {len(recipes)} image(s)",
                extra={"request_id": request_id, "phase": LoadingPhase.GENERATING_IMAGES.name},
            )
            illustrated = await self._illustrate(list(recipes), request_id)
            if not self._is_current(request_id):
                return None

            self._recipes = tuple(illustrated)
            entry = HistoryEntry.capture(ingredients, illustrated)
            self.history.append(entry)
            logger.info(
                f"Generated {len(illustrated)} recipe(s), "
                f"{sum(recipe.has_image for recipe in illustrated)} with images (history entry {entry.id})",
                extra={"request_id": request_id},
            )
            return illustrated
        except Exception as e:
            self._fail(request_id, e, UNKNOWN_ERROR_MESSAGE)
            return None
        finally:
            self._finish(request_id)

    async def identify_from_image(self, file: Any, mime_type: Optional[str] = None) -> Optional[List[str]]:
        """Identify ingredients in a photo and merge them into the ingredient set.

        Clears the displayed recipes; this workflow never produces recipes itself.

        Returns:
            The identified names, or None if the run failed or was superseded.
        """
        request_id = self._begin(LoadingPhase.IDENTIFYING_INGREDIENTS)
        logger.info("Identifying ingredients from image", extra={"request_id": request_id})
        try:
            payload = await self._encode(file, mime_type)
            if not self._is_current(request_id):
                return None

            names = await self.service.identify_ingredients(payload.data, payload.mime_type)
            if not self._is_current(request_id):
                return None

            merged = self.ingredients.merge_identified(names)
            logger.info(
                f"Identified {len(names)} ingredient(s), set now holds {len(merged)}",
                extra={"request_id": request_id},
            )
            return list(names)
        except Exception as e:
            self._fail(request_id, e, UNKNOWN_IMAGE_ERROR_MESSAGE)
            return None
        finally:
            self._finish(request_id)

    upload_image = identify_from_image

    async def _illustrate(self, recipes: List[Recipe], request_id: int) -> List[Recipe]:
        """Request one image per recipe concurrently and attach those that succeed."""
        results = await asyncio.gather(
            *(self.service.generate_image(recipe) for recipe in recipes),
            return_exceptions=True,
        )

        illustrated = []
        for position, (recipe, result) in enumerate(zip(recipes, results), start=1):
            if isinstance(result, BaseException):
                logger.warning(
                    f"Image {position}/{len(recipes)} for '{recipe.name}' failed, keeping recipe without image: "
                    f"{describe_error(result, type(result).__name__)}",
                    extra={"request_id": request_id},
                )
                illustrated.append(recipe)
            elif result:
                illustrated.append(recipe.with_image(result))
            else:
                illustrated.append(recipe)
        return illustrated

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def _begin(self, phase: LoadingPhase) -> int:
        self._request_id += 1
        self._loading_phase = phase
        self._error = None
        self._recipes = ()
        self._notify()
        return self._request_id

    def _is_current(self, request_id: int) -> bool:
        if request_id == self._request_id:
            return True
        logger.info("Discarding results of a superseded request", extra={"request_id": request_id})
        return False

    def _set_phase(self, phase: LoadingPhase) -> None:
        self._loading_phase = phase
        self._notify()

    def _fail(self, request_id: int, exc: Exception, fallback: str) -> None:
        if request_id != self._request_id:
            logger.info(f"Superseded request failed: {exc}", extra={"request_id": request_id})
            return
        self._error = describe_error(exc, fallback)
        logger.error(
            f"{type(exc).__name__} during {self._loading_phase.name.lower() if self._loading_phase else 'workflow'}: "
            f"{self._error}",
            extra={"request_id": request_id},
        )

    def _finish(self, request_id: int) -> None:
        if request_id != self._request_id:
            return
        self._loading_phase = None
        self._notify()
