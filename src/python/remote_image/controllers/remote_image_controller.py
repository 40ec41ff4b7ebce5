"""
Remote image controller - owns the load lifecycle of one remote image.

The UI layer calls ``on_attach``/``on_detach`` when the owning view enters or
leaves the tree and listens to ``phase_changed`` to re-render.
"""

import asyncio
import contextlib
import logging
import weakref
from functools import partial
from typing import Optional

from PySide6.QtCore import QObject, Signal

from ..core.cache_keys import URLLike
from ..core.errors import InvalidImageDataError
from ..core.decoder import decode_image
from ..core.models import RemoteImageHandle
from ..core.response_cache import ResponseCache
from ..models import (
    AnimationSpec,
    Failed,
    Loaded,
    Phase,
    Placeholder,
    RemoteImageConfiguration,
)
from ..services import ImageFetcherInterface
from ..services.session import CachingSession


def _on_loading_task_done(controller_ref: weakref.ref, generation: int, task: asyncio.Task):
    controller = controller_ref()
    if controller is None:
        return
    controller._loading_task_finished(task, generation)


class RemoteImageController(QObject):
    """Controller (view model) for a single remote image."""

    # Emitted on every phase change: (phase, animated)
    phase_changed = Signal(object, bool)

    def __init__(self, url: Optional[URLLike], session: ImageFetcherInterface,
                 configuration: Optional[RemoteImageConfiguration] = None,
                 loop: Optional[asyncio.AbstractEventLoop] = None, parent: Optional[QObject] = None):
        """
        Create a new controller. Performs no I/O.

        Args:
            url: Image URL, or None for a permanent placeholder
            session: Session used for remote image fetching and caching
            configuration: Load configuration; defaults are used if omitted
            loop: Event loop for load tasks; the running loop is used if omitted
            parent: Optional Qt parent object
        """
        super().__init__(parent)
        if session is None:
            raise ValueError("A session is required")
        self._url: Optional[str] = str(url) if url else None
        self._session = session
        self._configuration = configuration if configuration is not None else RemoteImageConfiguration()
        self._loop = loop

        self._phase: Phase = Placeholder()
        self._animated = False
        self._last_animation: Optional[AnimationSpec] = None
        self._loading_task: Optional[asyncio.Task] = None
        self._generation = 0

    @classmethod
    def from_cache(cls, url: Optional[URLLike], cache: ResponseCache,
                   configuration: Optional[RemoteImageConfiguration] = None,
                   **kwargs) -> 'RemoteImageController':
        """Create a controller on a new session built around ``cache``."""
        return cls(url, CachingSession.with_cache(cache), configuration, **kwargs)

    # Properties

    @property
    def url(self) -> Optional[str]:
        return self._url

    @property
    def session(self) -> ImageFetcherInterface:
        return self._session

    @property
    def configuration(self) -> RemoteImageConfiguration:
        return self._configuration

    @property
    def phase(self) -> Phase:
        """The current image phase."""
        return self._phase

    @property
    def animated(self) -> bool:
        """Whether the last phase change should be animated."""
        return self._animated

    @property
    def last_animation(self) -> Optional[AnimationSpec]:
        """Animation to apply for the last phase change, or None if it is not animated."""
        return self._last_animation

    @property
    def loading_task(self) -> Optional[asyncio.Task]:
        return self._loading_task

    @property
    def cache(self) -> Optional[ResponseCache]:
        """The cache used by the session."""
        return getattr(self._session, "cache", None)

    @property
    def cached_image(self) -> Optional[RemoteImageHandle]:
        """The cached image, if one exists and decodes."""
        if self._configuration.skip_cache or self._url is None:
            return None
        data = self._session.cache_lookup(self._url)
        if data is None:
            return None
        try:
            return self.create_image(data)
        except InvalidImageDataError:
            return None

    # Lifecycle

    def on_attach(self):
        """Load the image from either the local cache or the remote URL.

        Called when the owning view appears.
        """
        if self._phase.is_loaded:
            self._log(logging.DEBUG, "Image already loaded. Skipping attach.")
            return
        if self._loading_task is not None and not self._loading_task.done():
            self._log(logging.DEBUG, "Image load already in flight. Skipping attach.")
            return
        if self._url is None:
            self._log(logging.DEBUG, "Image URL is None. Staying on placeholder.")
            return

        if not self._configuration.skip_cache:
            cached = self.cached_image
            if cached is not None:
                self._log(logging.DEBUG, "Cached image found for %s.", self._url)
                self._set_phase(Loaded(cached), animated=False)
                return

        self._generation += 1
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()
        task = loop.create_task(self._load(self._generation))
        self._loading_task = task
        task.add_done_callback(partial(_on_loading_task_done, weakref.ref(self), self._generation))

    def on_detach(self):
        """Cancel any in-flight remote image load.

        Called when the owning view disappears.
        """
        task = self._loading_task
        if task is None:
            return
        self._loading_task = None
        if not task.done():
            self._log(logging.DEBUG, "Cancelling in-flight image load.")
            task.cancel()

    # Loading

    async def load_image_if_needed(self):
        """Load the image if needed.

        If the current phase is already loaded, or the URL is None, this returns
        without touching the phase. Cancels any load started by ``on_attach``
        so only one fetch is ever in flight.
        """
        task = self._loading_task
        if task is not None:
            self._loading_task = None
            if not task.done():
                self._log(logging.DEBUG, "Cancelling in-flight image load in favour of a direct load.")
                task.cancel()
        self._generation += 1
        await self._load(self._generation)

    async def _load(self, generation: int):
        url = self._url
        if url is None or self._phase.is_loaded:
            self._log(logging.DEBUG, "Image phase was already loaded, or image URL was None. Skipping image load.")
            return

        configuration = self._configuration
        self._log(logging.DEBUG, "Loading remote image from %s...", url)
        try:
            data, _, did_load_from_cache = await self._session.fetch_with_cache_info(
                url, skip_cache=configuration.skip_cache
            )
            self._checkpoint(generation)
            self._log(logging.DEBUG, "Image loaded with %d bytes. From cache: %s.", len(data), did_load_from_cache)

            image = await asyncio.to_thread(self.create_image, data)
            self._checkpoint(generation)

            disable_animation = did_load_from_cache and configuration.disable_animation_with_cached_response
            self._set_phase(Loaded(image), animated=not disable_animation)
        except asyncio.CancelledError:
            self._log(logging.DEBUG, "Image load cancelled.")
            self._revert_to_placeholder(generation)
            raise
        except Exception as e:
            if generation != self._generation:
                self._log(logging.DEBUG, "Dropping error from superseded load: %s", e)
                return
            self._log(logging.ERROR, "Failed to load remote image: %s", e)
            self._set_phase(Failed(e), animated=True)

    def create_image(self, data: bytes) -> RemoteImageHandle:
        """Create an image from ``data``.

        Raises InvalidImageDataError if the data is invalid or corrupted.
        """
        image = decode_image(data, self._configuration.scale)
        if image is None:
            self._log(logging.ERROR, "Could not create an image from data (%d bytes).", len(data))
            raise InvalidImageDataError(self._url, len(data))
        self._log(logging.DEBUG, "Decoded image: %sx%s %s.", image.pixel_size[0], image.pixel_size[1], image.mode)
        return image

    def _checkpoint(self, generation: int):
        if generation != self._generation:
            raise asyncio.CancelledError()

    def _loading_task_finished(self, task: asyncio.Task, generation: int):
        if self._loading_task is task:
            self._loading_task = None
        if task.cancelled():
            # Also covers tasks cancelled before their first step.
            self._revert_to_placeholder(generation)
            return
        exc = task.exception()
        if exc is not None:
            self._log(logging.ERROR, "Image load task crashed: %r", exc)

    def _revert_to_placeholder(self, generation: int):
        if generation != self._generation or self._phase.is_placeholder:
            return
        self._set_phase(Placeholder(), animated=False)

    def _set_phase(self, phase: Phase, animated: bool):
        """Set the image phase and notify listeners."""
        self._phase = phase
        self._animated = animated
        self._last_animation = self._configuration.animation if animated else None
        self._log(logging.DEBUG, "Setting phase to .%s. Animated: %s.", phase.kind.value, animated)
        self.phase_changed.emit(phase, animated)

    def _log(self, level: int, msg: str, *args):
        logger = self._configuration.logger
        if logger is None:
            return
        with contextlib.suppress(Exception):
            logger.log(level, msg, *args)
