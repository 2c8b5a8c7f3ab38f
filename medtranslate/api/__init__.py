"""
API boundary for the medtranslate service.

Design intent:
- Expose thin, typed endpoints for translation, session history and health.
- Keep request validation explicit and failure bodies predictable.
"""
