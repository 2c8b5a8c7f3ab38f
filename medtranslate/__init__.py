"""
medtranslate: live patient/provider speech translation.

Design intent:
- Keep the session pipeline (recognition -> translation -> speech) engine-agnostic.
- Treat recognition, synthesis and the translation model as swappable collaborators.
- Serve translation and a short in-memory session history over a thin HTTP API.
"""
