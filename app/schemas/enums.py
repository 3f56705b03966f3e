from __future__ import annotations

"""
Enums mirroring the Mux Video API vocabulary.

Design notes
------------
• All enums subclass `str, PyEnum` for JSON-friendly serialization.
• Values are exactly what Mux sends/accepts; do not rename them.
"""

from enum import Enum as PyEnum


class AssetStatus(str, PyEnum):
    """Processing state of an asset on the platform."""
    PREPARING = "preparing"
    READY = "ready"
    ERRORED = "errored"


class PlaybackPolicy(str, PyEnum):
    """Access policy of a playback id."""
    PUBLIC = "public"
    SIGNED = "signed"


class SignatureType(str, PyEnum):
    """Audience claim of a signed playback token."""
    VIDEO = "v"
    THUMBNAIL = "t"
    GIF = "g"
    STORYBOARD = "s"


__all__ = ["AssetStatus", "PlaybackPolicy", "SignatureType"]
