"""
Data models for remote_image.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from ..config import CONFIG
from ..core.models import RemoteImageHandle
from ..logger import get_logger


class PhaseKind(Enum):
    """Enumeration of image phases."""
    PLACEHOLDER = "placeholder"
    LOADED = "loaded"
    FAILED = "failed"


class Phase:
    """The current phase of a remote image: placeholder, loaded or failed."""

    kind: PhaseKind

    @property
    def image(self) -> Optional[RemoteImageHandle]:
        """The current image, if any."""
        return None

    @property
    def error(self) -> Optional[BaseException]:
        return None

    @property
    def is_placeholder(self) -> bool:
        return self.kind is PhaseKind.PLACEHOLDER

    @property
    def is_loaded(self) -> bool:
        return self.kind is PhaseKind.LOADED

    @property
    def is_failed(self) -> bool:
        return self.kind is PhaseKind.FAILED


@dataclass(frozen=True)
class Placeholder(Phase):
    """An image has yet to load or the URL is None."""
    kind = PhaseKind.PLACEHOLDER


@dataclass(frozen=True)
class Loaded(Phase):
    """An image has been successfully loaded."""
    loaded_image: RemoteImageHandle
    kind = PhaseKind.LOADED

    @property
    def image(self) -> RemoteImageHandle:
        return self.loaded_image


@dataclass(frozen=True)
class Failed(Phase):
    """An image failed to load."""
    failure: BaseException
    kind = PhaseKind.FAILED

    def __post_init__(self):
        if self.failure is None:
            raise ValueError("Failed phase requires an error")

    @property
    def error(self) -> BaseException:
        return self.failure


@dataclass(frozen=True)
class AnimationSpec:
    """Animation used when the phase changes. Passed through untouched to the UI layer."""
    duration_ms: int = CONFIG["ANIMATION_DURATION_MS"]
    easing: str = CONFIG["ANIMATION_EASING"]
    delay_ms: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AnimationSpec':
        return cls(
            duration_ms=int(data.get('duration_ms', CONFIG["ANIMATION_DURATION_MS"])),
            easing=str(data.get('easing', CONFIG["ANIMATION_EASING"])),
            delay_ms=int(data.get('delay_ms', 0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'duration_ms': self.duration_ms,
            'easing': self.easing,
            'delay_ms': self.delay_ms,
        }


def _default_logger() -> logging.Logger:
    return get_logger("controller")


@dataclass(frozen=True)
class RemoteImageConfiguration:
    """Configuration parameters for remote images."""
    skip_cache: bool = False
    scale: float = CONFIG["DEFAULT_SCALE"]
    animation: AnimationSpec = field(default_factory=AnimationSpec)
    disable_animation_with_cached_response: bool = True
    logger: Optional[logging.Logger] = field(default_factory=_default_logger, compare=False)

    def __post_init__(self):
        if self.scale <= 0:
            raise ValueError("Image scale must be positive")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RemoteImageConfiguration':
        """Create a configuration from a settings dictionary."""
        return cls(
            skip_cache=bool(data.get('skip_cache', False)),
            scale=float(data.get('scale', CONFIG["DEFAULT_SCALE"])),
            animation=AnimationSpec.from_dict(data.get('animation', {})),
            disable_animation_with_cached_response=bool(
                data.get('disable_animation_with_cached_response', True)
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'skip_cache': self.skip_cache,
            'scale': self.scale,
            'animation': self.animation.to_dict(),
            'disable_animation_with_cached_response': self.disable_animation_with_cached_response,
        }


__all__ = [
    'PhaseKind',
    'Phase',
    'Placeholder',
    'Loaded',
    'Failed',
    'AnimationSpec',
    'RemoteImageConfiguration',
    'RemoteImageHandle',
]
