"""HTTP handlers.

Handlers sit between FastAPI routes and the service layer.
They handle HTTP concerns like status codes, validation, rendering
and error normalization.
"""

from .apod_handler import ApodHandler

__all__ = ["ApodHandler"]
