"""
Service package marker.

Intentionally empty to avoid heavy imports at package import time.
Import the concrete modules directly, e.g.:

    from services.filtering import filter_events
    from services.normalize import normalize_token, extract_types
    from services import storage
"""
__all__: list[str] = []
