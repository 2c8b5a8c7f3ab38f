"""
Translation boundary: backends, prompt framing and chunk dispatch.

Design intent:
- Keep provider HTTP details out of the session pipeline.
- Make the service itself usable as a backend through the same interface.
"""
