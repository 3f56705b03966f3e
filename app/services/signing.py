from __future__ import annotations

"""
Signing utilities for signed-policy Mux playback.

A signed playback URL carries a short-lived RS256 JWT:
- header `kid` = signing key id (issued by Mux alongside the private key)
- `sub` = playback id, `aud` = signature type (`v` video, `t` thumbnail, ...)
- `exp` = now + MUX_SIGNED_URL_TTL_SECONDS

Signing never falls back to public playback: without a key the caller gets
`SigningNotConfigured`.
"""

import logging
import time
from typing import Optional

from jose import jwt
from jose.exceptions import JOSEError

from app.core.config import Settings, settings as default_settings
from app.core.exceptions import ConfigurationError, SigningNotConfigured
from app.schemas.enums import SignatureType

logger = logging.getLogger(__name__)


class PlaybackSigner:
    """Issues playback tokens bound to one playback id."""

    def __init__(self, config: Optional[Settings] = None) -> None:
        self._config = config or default_settings

    @property
    def configured(self) -> bool:
        return self._config.signing_configured

    def ensure_configured(self) -> None:
        if not self.configured:
            raise SigningNotConfigured()

    def sign(
        self,
        playback_id: str,
        signature_type: SignatureType = SignatureType.VIDEO,
        *,
        expires_in: Optional[int] = None,
    ) -> str:
        """Return a JWT for `playback_id`. Raises `SigningNotConfigured` without keys."""
        self.ensure_configured()
        ttl = int(expires_in or self._config.MUX_SIGNED_URL_TTL_SECONDS)
        claims = {
            "sub": playback_id,
            "aud": signature_type.value,
            "exp": int(time.time()) + ttl,
        }
        try:
            return jwt.encode(
                claims,
                self._config.signing_private_key_pem,
                algorithm="RS256",
                headers={"kid": self._config.MUX_SIGNING_KEY_ID},
            )
        except (JOSEError, ValueError) as e:
            # A malformed key is a deployment problem, not a client one.
            logger.error("Playback token signing failed: %s", e.__class__.__name__)
            raise ConfigurationError("Signing key is invalid", code="signing_key_invalid") from e


__all__ = ["PlaybackSigner"]
