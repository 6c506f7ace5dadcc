"""
OTP Models
==========
The cached record of an outstanding phone OTP.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict


@dataclass(frozen=True)
class OTPRecord:
    """An outstanding OTP, cached under the phone number."""
    otp: str
    country: str
    expire_at: int  # Unix timestamp, milliseconds

    def remaining_ms(self, now_ms: int) -> int:
        return self.expire_at - now_ms

    def is_live(self, now_ms: int) -> bool:
        return self.remaining_ms(now_ms) > 0

    @property
    def expire_at_iso(self) -> str:
        """UTC expiry as ``YYYY-MM-DDTHH:MM:SS.sssZ``."""
        seconds, millis = divmod(self.expire_at, 1000)
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc) + timedelta(milliseconds=millis)
        return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def to_cache(self) -> Dict[str, Any]:
        return {"otp": self.otp, "country": self.country, "expireAt": self.expire_at}

    @classmethod
    def from_cache(cls, value: Dict[str, Any]) -> "OTPRecord":
        return cls(
            otp=str(value["otp"]),
            country=value["country"],
            expire_at=int(value["expireAt"]),
        )
