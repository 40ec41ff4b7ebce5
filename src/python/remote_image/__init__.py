"""
remote_image package initialization.
"""

# Import core components
from .core import (
    RemoteImageError,
    InvalidImageDataError,
    RemoteImageHandle,
    FetchResult,
    ResponseCache,
    shared_cache,
    CachePolicy,
    CacheListener,
    CachingTransport,
    decode_image,
)

# Import models
from .models import (
    PhaseKind,
    Phase,
    Placeholder,
    Loaded,
    Failed,
    AnimationSpec,
    RemoteImageConfiguration,
)

# Import services
from .services import CachingSession, ConfigService, shared_session

# Import controllers and UI glue
from .controllers import RemoteImageController
from .ui import RemoteImage, content_for_phase, image_or_empty

# Import configuration
from .config import CONFIG

__version__ = "1.0.0"

__all__ = [
    # Core components
    "RemoteImageError",
    "InvalidImageDataError",
    "RemoteImageHandle",
    "FetchResult",
    "ResponseCache",
    "shared_cache",
    "CachePolicy",
    "CacheListener",
    "CachingTransport",
    "decode_image",

    # Models
    "PhaseKind",
    "Phase",
    "Placeholder",
    "Loaded",
    "Failed",
    "AnimationSpec",
    "RemoteImageConfiguration",

    # Services
    "CachingSession",
    "ConfigService",
    "shared_session",

    # Controllers and UI glue
    "RemoteImageController",
    "RemoteImage",
    "content_for_phase",
    "image_or_empty",

    # Configuration
    "CONFIG",
]
