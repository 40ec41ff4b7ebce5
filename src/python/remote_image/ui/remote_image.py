"""
Toolkit-neutral remote image view.

``RemoteImage`` pairs a ``RemoteImageController`` with builder callbacks that
turn the current phase into whatever the host UI toolkit renders. The
controller never calls the builders; the host calls ``body()`` whenever
``phase_changed`` fires.
"""

from typing import Any, Callable, Optional

from ..controllers import RemoteImageController
from ..core.cache_keys import URLLike
from ..core.models import RemoteImageHandle
from ..core.response_cache import ResponseCache
from ..models import Phase, RemoteImageConfiguration
from ..services import ImageFetcherInterface
from ..services.session import CachingSession, shared_session

PhaseBuilder = Callable[[Phase], Any]
ContentBuilder = Callable[[RemoteImageHandle], Any]
PlaceholderBuilder = Callable[[], Any]
FailureBuilder = Callable[[BaseException], Any]


def image_or_empty(phase: Phase) -> Optional[RemoteImageHandle]:
    """The loaded image for ``phase``, otherwise None (an empty image)."""
    return phase.image


def content_for_phase(phase: Phase,
                      content: ContentBuilder,
                      placeholder: Optional[PlaceholderBuilder] = None,
                      failure: Optional[FailureBuilder] = None) -> Any:
    """Dispatch ``phase`` to the matching builder.

    Without a failure builder, failures show the placeholder. Without a
    placeholder builder, nothing (None) is shown.
    """
    if phase.is_loaded:
        return content(phase.image)
    if phase.is_failed and failure is not None:
        return failure(phase.error)
    return placeholder() if placeholder is not None else None


class RemoteImage:
    """A view that displays an image fetched from a URL, with caching."""

    def __init__(self, url: Optional[URLLike],
                 session: Optional[ImageFetcherInterface] = None,
                 cache: Optional[ResponseCache] = None,
                 configuration: Optional[RemoteImageConfiguration] = None,
                 content: Optional[Callable[..., Any]] = None,
                 placeholder: Optional[PlaceholderBuilder] = None,
                 failure: Optional[FailureBuilder] = None,
                 phase_content: Optional[PhaseBuilder] = None,
                 did_appear: Optional[Callable[['RemoteImage'], None]] = None,
                 **controller_kwargs):
        """
        Initialize a new RemoteImage.

        Args:
            url: The URL of the image to display
            session: Session to fetch with; the shared session is used if omitted
            cache: Cache to build a dedicated session around (takes precedence over session)
            configuration: Configuration options; defaults are used if omitted
            content: Builder for the loaded image
            placeholder: Builder shown until the image loads
            failure: Builder shown if the image fails to load
            phase_content: Builder taking the phase itself, for full control
            did_appear: Hook called after ``on_appear``
        """
        if phase_content is not None and (content or placeholder or failure):
            raise ValueError("phase_content cannot be combined with content/placeholder/failure")

        if cache is not None:
            session = CachingSession.with_cache(cache)
        elif session is None:
            session = shared_session()

        self.controller = RemoteImageController(url, session, configuration, **controller_kwargs)
        self.did_appear = did_appear

        if phase_content is not None:
            self._content: PhaseBuilder = phase_content
        elif content is not None:
            self._content = lambda phase: content_for_phase(phase, content, placeholder, failure)
        elif placeholder is not None or failure is not None:
            self._content = lambda phase: content_for_phase(phase, lambda image: image, placeholder, failure)
        else:
            self._content = image_or_empty

    @property
    def phase(self) -> Phase:
        return self.controller.phase

    def body(self) -> Any:
        """The content for the current phase."""
        return self._content(self.controller.phase)

    def on_appear(self):
        self.controller.on_attach()
        if self.did_appear is not None:
            self.did_appear(self)

    def on_disappear(self):
        self.controller.on_detach()
