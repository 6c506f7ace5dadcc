"""
Flow Configuration Models
=========================
Typed configuration records for the OTP and reset flows.

Configuration blobs are untyped key/value maps owned by the configuration
service. Each flow validates its blob once, here, and works with the typed
record afterwards.
"""

from datetime import timedelta
from typing import Any, ClassVar, Dict, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import ConfigurationError

OTP_MIN_LENGTH = 4
OTP_MAX_LENGTH = 10
DEFAULT_OTP_LIFETIME_MS = 3 * 60 * 1000

EXPIRES_IN_DURATIONS: Dict[str, timedelta] = {
    "1h": timedelta(hours=1),
    "2h": timedelta(hours=2),
    "3h": timedelta(hours=3),
    "6h": timedelta(hours=6),
    "12h": timedelta(hours=12),
    "1d": timedelta(days=1),
}
VALID_EXPIRES_IN = list(EXPIRES_IN_DURATIONS)

ExpiresIn = Literal["1h", "2h", "3h", "6h", "12h", "1d"]
SigningAlgorithm = Literal["HS256", "HS384", "HS512"]


def _failed_field(exc: ValidationError) -> str:
    """Name of the first field that failed validation."""
    loc = exc.errors()[0]["loc"]
    return str(loc[0]) if loc else ""


class OTPFlowConfig(BaseModel):
    """Configuration of the phone OTP flow (blob ``AUTH_CONFIG``)."""

    model_config = ConfigDict(frozen=True)

    LENGTH_KEY: ClassVar[str] = "auth_phone_otp_length"
    TEMPLATE_KEY: ClassVar[str] = "auth_phone_otp_template"
    LIFETIME_KEY: ClassVar[str] = "otp_expire_time"

    otp_length: int = Field(ge=OTP_MIN_LENGTH, le=OTP_MAX_LENGTH)
    template: str = Field(min_length=1)
    lifetime_ms: int = Field(default=DEFAULT_OTP_LIFETIME_MS, gt=0)

    @classmethod
    def from_blob(cls, blob: Mapping[str, Any]) -> "OTPFlowConfig":
        """
        Validate an ``AUTH_CONFIG`` blob.

        Raises:
            ConfigurationError: NEED_OTP_LENGTH_IN_CONFIG,
                OTP_LENGTH_MUST_BE_BETWEEN_4_AND_10,
                NEED_OTP_TEMPLATE_IN_CONFIG or INVALID_OTP_EXPIRE_TIME
        """
        if not blob.get(cls.LENGTH_KEY):
            raise ConfigurationError(
                "NEED_OTP_LENGTH_IN_CONFIG", data={"key": cls.LENGTH_KEY}
            )

        lifetime = blob.get(cls.LIFETIME_KEY)
        try:
            return cls(
                otp_length=blob[cls.LENGTH_KEY],
                template=blob.get(cls.TEMPLATE_KEY),
                lifetime_ms=DEFAULT_OTP_LIFETIME_MS if lifetime is None else lifetime,
            )
        except ValidationError as e:
            field = _failed_field(e)
            if field == "otp_length":
                raise ConfigurationError(
                    "OTP_LENGTH_MUST_BE_BETWEEN_4_AND_10",
                    data={"min": OTP_MIN_LENGTH, "max": OTP_MAX_LENGTH},
                ) from e
            if field == "template":
                raise ConfigurationError(
                    "NEED_OTP_TEMPLATE_IN_CONFIG", data={"key": cls.TEMPLATE_KEY}
                ) from e
            raise ConfigurationError(
                "INVALID_OTP_EXPIRE_TIME",
                data={"key": cls.LIFETIME_KEY, "value": lifetime},
            ) from e


class ResetSecretConfig(BaseModel):
    """Signing parameters of reset tokens (blob ``EMAIL_FORGET_CONFIG``)."""

    model_config = ConfigDict(frozen=True)

    SECRET_KEY: ClassVar[str] = "email_jwt_secret"
    ALGORITHM_KEY: ClassVar[str] = "email_jwt_algorithm"

    secret: str = Field(min_length=1)
    algorithm: SigningAlgorithm = "HS256"

    @classmethod
    def _require(cls, blob: Mapping[str, Any], *keys: str) -> None:
        for key in keys:
            if key not in blob:
                raise ConfigurationError("NEED_KEY_IN_CONFIGS", data={"key": key})

    @classmethod
    def _map_error(cls, exc: ValidationError, blob: Mapping[str, Any]) -> ConfigurationError:
        field = _failed_field(exc)
        if field == "algorithm":
            return ConfigurationError(
                "NEED_VALID_JWT_ALGORITHM",
                data={"valid": ["HS256", "HS384", "HS512"], "value": blob.get(cls.ALGORITHM_KEY)},
            )
        # Present but empty or mistyped values are as unusable as missing ones
        return ConfigurationError("NEED_KEY_IN_CONFIGS", data={"key": cls.SECRET_KEY})

    @classmethod
    def from_blob(cls, blob: Mapping[str, Any]) -> "ResetSecretConfig":
        cls._require(blob, cls.SECRET_KEY)
        try:
            return cls(
                secret=blob[cls.SECRET_KEY],
                algorithm=blob.get(cls.ALGORITHM_KEY) or "HS256",
            )
        except ValidationError as e:
            raise cls._map_error(e, blob) from e


class ResetFlowConfig(ResetSecretConfig):
    """Full configuration needed to issue a reset email."""

    TEMPLATE_KEY: ClassVar[str] = "email_forget_template"
    EXPIRES_IN_KEY: ClassVar[str] = "email_jwt_expiresIn"

    template: str = Field(min_length=1)
    expires_in: ExpiresIn

    @property
    def expires_delta(self) -> timedelta:
        return EXPIRES_IN_DURATIONS[self.expires_in]

    @classmethod
    def from_blob(cls, blob: Mapping[str, Any]) -> "ResetFlowConfig":
        """
        Validate an ``EMAIL_FORGET_CONFIG`` blob for token issuance.

        Raises:
            ConfigurationError: NEED_KEY_IN_CONFIGS or NEED_VALID_EXPIRES_IN
        """
        cls._require(blob, cls.TEMPLATE_KEY, cls.SECRET_KEY, cls.EXPIRES_IN_KEY)

        expires_in = blob[cls.EXPIRES_IN_KEY]
        if not isinstance(expires_in, str) or expires_in not in EXPIRES_IN_DURATIONS:
            raise ConfigurationError(
                "NEED_VALID_EXPIRES_IN",
                data={"valid": VALID_EXPIRES_IN, "value": expires_in},
            )

        try:
            return cls(
                secret=blob[cls.SECRET_KEY],
                algorithm=blob.get(cls.ALGORITHM_KEY) or "HS256",
                template=blob[cls.TEMPLATE_KEY],
                expires_in=blob[cls.EXPIRES_IN_KEY],
            )
        except ValidationError as e:
            if _failed_field(e) == "template":
                raise ConfigurationError(
                    "NEED_KEY_IN_CONFIGS", data={"key": cls.TEMPLATE_KEY}
                ) from e
            raise cls._map_error(e, blob) from e
