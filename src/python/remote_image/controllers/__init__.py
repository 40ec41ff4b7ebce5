"""
Controllers package - view models that drive remote image loading for the UI.
"""

from .remote_image_controller import RemoteImageController

__all__ = [
    'RemoteImageController'
]
