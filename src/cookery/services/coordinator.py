"""Cancelable, single-in-flight-per-scope generation requests."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from uuid import UUID

from cookery.domain.recipes import Recipe
from cookery.services.cancellation import CancellationToken
from cookery.services.enrichment import RecipePhotoOrchestrator
from cookery.services.recipes import GenerationFailedError, RecipeTextGenerator

logger = logging.getLogger(__name__)

GENERATE_RECIPE_SCOPE = "generate-recipe"

Work = Callable[[CancellationToken], Awaitable[Recipe]]
RecipeCallback = Callable[[Recipe], object]
FailureCallback = Callable[[Exception], object]
InFlightListener = Callable[[str, bool], None]


def recipe_scope(recipe_id: UUID) -> str:
    """Scope used by the detail view of a single recipe."""
    return f"recipe:{recipe_id}"


async def _call(callback: Callable[..., object], *args: object) -> None:
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


@dataclass
class GenerationHandle:
    """A running request bound to a scope."""

    scope: str
    token: CancellationToken
    task: asyncio.Task[None] | None = None

    @property
    def done(self) -> bool:
        """Whether the underlying task has finished."""
        return self.task is not None and self.task.done()

    def cancel(self) -> None:
        """Cancel the token and the task."""
        self.token.cancel()
        if self.task is not None:
            self.task.cancel()

    async def wait(self) -> None:
        """Wait for the task to settle, including cancellation."""
        if self.task is None:
            return
        try:
            await self.task
        except asyncio.CancelledError:
            if not self.token.cancelled:
                raise


@dataclass
class GenerationCoordinator:
    """Runs at most one generation per scope and tracks its in-flight flag."""

    orchestrator: RecipePhotoOrchestrator
    generator: RecipeTextGenerator
    navigation_delay_seconds: float = 1.0
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    _handles: dict[str, GenerationHandle] = field(default_factory=dict, init=False)
    _in_flight: set[str] = field(default_factory=set, init=False)
    _listeners: list[InFlightListener] = field(default_factory=list, init=False)

    def in_flight(self, scope: str) -> bool:
        """Return the in-flight flag for a scope."""
        return scope in self._in_flight

    def subscribe(self, listener: InFlightListener) -> None:
        """Register a listener called as listener(scope, in_flight) on changes."""
        self._listeners.append(listener)

    def start(
        self,
        scope: str,
        work: Work,
        *,
        on_success: RecipeCallback,
        on_failure: FailureCallback | None = None,
        after_success: RecipeCallback | None = None,
    ) -> GenerationHandle:
        """Start work for a scope, cancelling whatever was running there."""
        self.cancel(scope)
        handle = GenerationHandle(scope=scope, token=CancellationToken())
        self._handles[scope] = handle
        self._set_in_flight(scope, True)
        handle.task = asyncio.create_task(
            self._run(handle, work, on_success, on_failure, after_success)
        )
        return handle

    def cancel(self, scope: str) -> bool:
        """Cancel the request for a scope; return whether one was live."""
        self._set_in_flight(scope, False)
        handle = self._handles.pop(scope, None)
        if handle is None or handle.done:
            return False
        handle.cancel()
        logger.info("Cancelled generation for scope %s", scope)
        return True

    def enrich_photos(
        self, scope: str, recipe: Recipe, on_success: RecipeCallback
    ) -> GenerationHandle:
        """Start photo enrichment for a recipe."""
        return self.start(
            scope,
            lambda token: self.orchestrator.enrich(recipe, token),
            on_success=on_success,
        )

    def generate_recipe(  # noqa: PLR0913
        self,
        scope: str,
        name: str,
        description: str,
        on_success: RecipeCallback,
        *,
        on_failure: FailureCallback | None = None,
        on_navigate: RecipeCallback | None = None,
    ) -> GenerationHandle:
        """Start full recipe generation."""
        return self.start(
            scope,
            lambda token: self.generator.generate(name, description, token),
            on_success=on_success,
            on_failure=on_failure,
            after_success=on_navigate,
        )

    async def aclose(self) -> None:
        """Cancel every scope and wait for the tasks to finish."""
        handles = list(self._handles.values())
        for handle in handles:
            self.cancel(handle.scope)
        for handle in handles:
            await handle.wait()

    async def _run(  # noqa: PLR0913
        self,
        handle: GenerationHandle,
        work: Work,
        on_success: RecipeCallback,
        on_failure: FailureCallback | None,
        after_success: RecipeCallback | None,
    ) -> None:
        token = handle.token
        try:
            recipe = await work(token)
        except Exception as exc:
            if isinstance(exc, GenerationFailedError):
                logger.warning("Generation failed for scope %s: %s", handle.scope, exc)
            else:
                logger.exception("Generation crashed for scope %s", handle.scope)
            self._finish(handle)
            if on_failure and not token.cancelled:
                await self._report_failure(handle, on_failure, exc)
            return
        if token.cancelled:
            return
        try:
            await _call(on_success, recipe)
            if after_success is None:
                return
            if self._handles.get(handle.scope) is handle:
                self._set_in_flight(handle.scope, False)
            token.raise_if_cancelled()
            await self.sleep(self.navigation_delay_seconds)
            token.raise_if_cancelled()
            await _call(after_success, recipe)
        except Exception:
            logger.exception("Delivering result failed for scope %s", handle.scope)
        finally:
            self._finish(handle)

    async def _report_failure(
        self, handle: GenerationHandle, callback: FailureCallback, exc: Exception
    ) -> None:
        try:
            await _call(callback, exc)
        except Exception:
            logger.exception("Failure callback raised for scope %s", handle.scope)

    def _finish(self, handle: GenerationHandle) -> None:
        if self._handles.get(handle.scope) is handle:
            del self._handles[handle.scope]
            self._set_in_flight(handle.scope, False)

    def _set_in_flight(self, scope: str, value: bool) -> None:
        if (scope in self._in_flight) == value:
            return
        if value:
            self._in_flight.add(scope)
        else:
            self._in_flight.discard(scope)
        for listener in self._listeners:
            listener(scope, value)
