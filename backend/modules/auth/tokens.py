"""
Application session tokens.

Compact HS256 tokens (header.payload.signature, URL-safe base64 without
padding) that the backend issues and verifies itself. Verification needs
nothing but the token and the shared secret; there is no session store.

PyJWT signs the token at the JWS level, so claims such as `aud`, `iss` or
`sub` are carried as plain data and never validated. Verification adds the
exact check order the API reports on and compares the signature segment as
a string, so a token whose signature segment differs in any character is
rejected even when it base64-decodes to the same bytes.
"""

import binascii
import hmac
import json
import time
from typing import Any, Callable, Mapping, Optional

from jwt.api_jws import PyJWS
from jwt.algorithms import HMACAlgorithm
from jwt.utils import base64url_decode, base64url_encode

from shared.config import Settings
from .exceptions import (
    MissingTokenError,
    MalformedTokenError,
    UnsupportedAlgorithmError,
    InvalidSignatureError,
    MalformedPayloadError,
    ExpiredTokenError,
)

ALGORITHM = "HS256"

# Claims stamped at issue time; refresh drops them before re-issuing
TIMESTAMP_CLAIMS = ("iat", "exp")

_HMAC_SHA256 = HMACAlgorithm(HMACAlgorithm.SHA256)

# Signs raw payload bytes; registered claims are not interpreted
_JWS = PyJWS()


class TokenService:
    """
    Issues, verifies and refreshes session tokens.

    Args:
        secret: Shared HMAC secret
        ttl_seconds: Default lifetime of issued tokens
        clock: Returns the current Unix time; injectable for tests
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int,
        clock: Callable[[], float] = time.time,
    ):
        if not secret:
            raise RuntimeError(
                "Session token secret missing. Set the APP_JWT_SECRET environment variable."
            )
        self._secret = secret
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, clock: Callable[[], float] = time.time) -> "TokenService":
        return cls(settings.app_jwt_secret, settings.app_jwt_expires_in_seconds, clock)

    def issue(self, claims: Mapping[str, Any], ttl_seconds: Optional[int] = None) -> str:
        """
        Issue a signed token carrying the given claims.

        `iat` and `exp` are always stamped here; values supplied by the
        caller for those claims are overwritten.
        """
        now = self._now()
        ttl = self._ttl_seconds if ttl_seconds is None else ttl_seconds
        payload = {**claims, "iat": now, "exp": now + ttl}
        body = json.dumps(payload, separators=(",", ":")).encode("utf-8")
        return _JWS.encode(body, self._secret, algorithm=ALGORITHM, headers={"typ": "JWT"})

    def verify(self, token: Optional[str]) -> dict[str, Any]:
        """
        Verify a token and return its claims.

        Checks run in order: segment count, header algorithm, signature,
        payload decoding, expiry.

        Raises:
            MissingTokenError: Empty token
            MalformedTokenError: Not exactly three segments
            UnsupportedAlgorithmError: Header unreadable or not HS256
            InvalidSignatureError: Signature segment does not match
            MalformedPayloadError: Payload is not a JSON object
            ExpiredTokenError: `exp` missing, non-numeric, or not in the future
        """
        if not token:
            raise MissingTokenError()

        segments = token.split(".")
        if len(segments) != 3:
            raise MalformedTokenError()
        header_segment, payload_segment, signature_segment = segments

        header = _decode_json_segment(header_segment)
        if not isinstance(header, dict):
            raise UnsupportedAlgorithmError()
        if header.get("alg") != ALGORITHM:
            raise UnsupportedAlgorithmError(str(header.get("alg")))

        expected = self._sign(f"{header_segment}.{payload_segment}")
        if not hmac.compare_digest(expected.encode("ascii"), signature_segment.encode("utf-8")):
            raise InvalidSignatureError()

        claims = _decode_json_segment(payload_segment)
        if not isinstance(claims, dict):
            raise MalformedPayloadError()

        exp = claims.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)) or exp <= self._now():
            raise ExpiredTokenError()

        return claims

    def refresh(self, token: Optional[str], ttl_seconds: Optional[int] = None) -> str:
        """
        Re-issue a still-valid token with fresh timestamps.

        Fails exactly like verify(); an expired token cannot be refreshed.
        """
        claims = self.verify(token)
        carried = {key: value for key, value in claims.items() if key not in TIMESTAMP_CLAIMS}
        return self.issue(carried, ttl_seconds)

    def _now(self) -> int:
        return int(self._clock())

    def _sign(self, signing_input: str) -> str:
        key = _HMAC_SHA256.prepare_key(self._secret)
        signature = _HMAC_SHA256.sign(signing_input.encode("utf-8"), key)
        return base64url_encode(signature).decode("ascii")


def _decode_json_segment(segment: str) -> Any:
    """Decode one base64url JSON segment, or None if it is not decodable."""
    try:
        return json.loads(base64url_decode(segment))
    except (binascii.Error, ValueError):
        return None
