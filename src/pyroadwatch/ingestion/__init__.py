"""Ingestion layer.

This package turns payloads received from upstream feeds and sensors into
the library's canonical models.
"""

__all__: list[str] = []
