"""
UI glue package - phase-to-content builders for host UI toolkits.
"""

from .remote_image import RemoteImage, content_for_phase, image_or_empty

__all__ = [
    'RemoteImage',
    'content_for_phase',
    'image_or_empty',
]
