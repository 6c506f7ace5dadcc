"""
Reset Token Signer
==================
Signs and verifies self-contained, time-bound reset tokens (JWT).
"""

import time
from datetime import timedelta
from typing import Callable

import jwt
import structlog

from ..config.models import ResetSecretConfig
from ..errors import FlowStateError
from .models import ResetClaims

logger = structlog.get_logger(__name__)

REQUIRED_CLAIMS = ["exp", "user", "creator"]


class ResetTokenSigner:
    """
    JWT signer for reset tokens.

    Secret and algorithm come from configuration, never from code, so a
    tenant can rotate its secret without a deploy.
    """

    def __init__(self, config: ResetSecretConfig, clock: Callable[[], float] = time.time):
        self.secret = config.secret
        self.algorithm = config.algorithm
        self.clock = clock

    def sign(self, claims: ResetClaims, expires_in: timedelta) -> str:
        issued_at = int(self.clock())
        payload = {
            "user": claims.user,
            "creator": claims.creator,
            "iat": issued_at,
            "exp": issued_at + int(expires_in.total_seconds()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> ResetClaims:
        """
        Check signature and expiry.

        Expiry is judged against the injected clock, not PyJWT's wall time,
        so the signer and the verifier always agree on "now".

        Raises:
            FlowStateError: INVALID_TOKEN, whatever check failed
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS, "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as e:
            logger.info("Reset token rejected", reason=type(e).__name__)
            raise FlowStateError("INVALID_TOKEN") from e

        expires_at = payload["exp"]
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            logger.info("Reset token rejected", reason="MalformedExpiry")
            raise FlowStateError("INVALID_TOKEN")
        if expires_at <= int(self.clock()):
            logger.info("Reset token rejected", reason="ExpiredSignatureError")
            raise FlowStateError("INVALID_TOKEN")

        return ResetClaims(user=payload["user"], creator=payload["creator"])
