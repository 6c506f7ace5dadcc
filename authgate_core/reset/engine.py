"""
Reset-Token Flow Engine
=======================
Proves email ownership with a signed, short-lived token and redeems it to
set a new password without the current one.

Tokens are stateless: nothing is stored, validity is carried by the
signature and the embedded expiry. Each token is bound to the creator tag
(client or tenant) that requested it and cannot be redeemed from another.
"""

import time
from typing import Callable

import structlog

from ..collaborators.base import CredentialStore, Directory, Notifier
from ..config.models import ResetFlowConfig, ResetSecretConfig
from ..config.provider import ConfigProvider, load_blob
from ..errors import FlowStateError, ValidationError
from .models import ResetClaims, normalize_creator
from .token import ResetTokenSigner

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_KEY = "EMAIL_FORGET_CONFIG"
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 255


class ResetFlowEngine:
    """Password-reset request/redeem lifecycle."""

    def __init__(
        self,
        config_provider: ConfigProvider,
        directory: Directory,
        credentials: CredentialStore,
        notifier: Notifier,
        clock: Callable[[], float] = time.time,
        config_key: str = DEFAULT_CONFIG_KEY,
    ):
        self.config_provider = config_provider
        self.directory = directory
        self.credentials = credentials
        self.notifier = notifier
        self.clock = clock
        self.config_key = config_key

    async def request_reset(self, email: str, creator: str) -> None:
        """
        Email a reset token to the owner of ``email``.

        The token is only ever delivered out of band.

        Raises:
            FlowStateError: EMAIL_NOT_FOUND
            ConfigurationError: NEED_KEY_IN_CONFIGS or NEED_VALID_EXPIRES_IN,
                raised before anything is signed or sent
            CollaboratorError: directory or email delivery failed
        """
        creator = normalize_creator(creator)

        user = await self.directory.get_by_unique("email", email)
        if user is None:
            logger.info("Reset requested for unknown email", creator=creator)
            raise FlowStateError("EMAIL_NOT_FOUND")

        blob = await load_blob(self.config_provider, self.config_key)
        config = ResetFlowConfig.from_blob(blob)

        signer = ResetTokenSigner(config, clock=self.clock)
        token = signer.sign(ResetClaims(user=user.id, creator=creator), config.expires_delta)

        await self.notifier.send_email(
            email,
            config.template,
            {
                "token": token,
                "firstname": user.firstname,
                "lastname": user.lastname,
                "fullname": user.fullname,
                "email": user.email,
            },
        )

        logger.info(
            "Reset email sent",
            user_id=user.id,
            creator=creator,
            expires_in=config.expires_in,
        )

    async def redeem_reset(self, token: str, new_password: str, creator: str) -> None:
        """
        Overwrite the password of the user named in ``token``.

        No session token is issued; the user signs in separately afterwards.

        Raises:
            ValidationError: PASSWORD_LENGTH_INVALID
            ConfigurationError: NEED_KEY_IN_CONFIGS (signing secret)
            FlowStateError: INVALID_TOKEN or BAD_CREATOR
            CollaboratorError: the credential store rejected the write
        """
        if not PASSWORD_MIN_LENGTH <= len(new_password) <= PASSWORD_MAX_LENGTH:
            raise ValidationError(
                "PASSWORD_LENGTH_INVALID",
                data={"min": PASSWORD_MIN_LENGTH, "max": PASSWORD_MAX_LENGTH},
            )
        creator = normalize_creator(creator)

        blob = await load_blob(self.config_provider, self.config_key)
        config = ResetSecretConfig.from_blob(blob)

        claims = ResetTokenSigner(config, clock=self.clock).verify(token)

        if claims.creator != creator:
            logger.warning(
                "Reset token used from another creator",
                user_id=claims.user,
                token_creator=claims.creator,
                creator=creator,
            )
            raise FlowStateError("BAD_CREATOR")

        await self.credentials.save(claims.user, new_password)

        logger.info("Password reset", user_id=claims.user, creator=creator)
