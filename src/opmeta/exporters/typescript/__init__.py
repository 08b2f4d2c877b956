"""TypeScript operation metadata exporter for opmeta."""

from .typescript import translate_to_typescript

__all__ = ["translate_to_typescript"]
