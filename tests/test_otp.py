"""
Unit Tests for the OTP Flow
===========================
Issuance, rate limiting, collision handling and verification.
"""

import pytest

from conftest import ScriptedRandom


class TestOTPCodeGenerator:
    """Tests for numeric code generation."""

    def test_generates_exact_length(self):
        """Codes have exactly the requested number of digits."""
        from authgate_core.otp import OTPCodeGenerator

        generator = OTPCodeGenerator()
        for length in range(4, 11):
            code = generator.generate(length)
            assert len(code) == length
            assert code.isdigit()
            assert code[0] != "0"

    def test_uses_full_range(self):
        """The random source is asked for [10^(n-1), 10^n - 1]."""
        from authgate_core.otp import OTPCodeGenerator

        rng = ScriptedRandom([1000, 9999])
        generator = OTPCodeGenerator(rng)

        assert generator.generate(4) == "1000"
        assert generator.generate(4) == "9999"

    @pytest.mark.parametrize("length", [0, 3, 11])
    def test_rejects_out_of_range_length(self, length):
        """Lengths outside 4..10 are a programming error."""
        from authgate_core.otp import OTPCodeGenerator

        with pytest.raises(ValueError):
            OTPCodeGenerator().generate(length)


class TestOTPRecord:
    """Tests for the cached OTP record."""

    def test_cache_shape(self):
        """Record serializes to the otp/country/expireAt map."""
        from authgate_core.otp import OTPRecord

        record = OTPRecord(otp="123456", country="+1", expire_at=1_700_000_180_000)

        assert record.to_cache() == {"otp": "123456", "country": "+1", "expireAt": 1_700_000_180_000}
        assert OTPRecord.from_cache(record.to_cache()) == record

    def test_remaining(self):
        """Remaining time is measured in milliseconds."""
        from authgate_core.otp import OTPRecord

        record = OTPRecord(otp="1234", country="+44", expire_at=10_000)

        assert record.remaining_ms(4_000) == 6_000
        assert record.is_live(9_999) is True
        assert record.is_live(10_000) is False

    def test_expiry_timestamp_format(self):
        """Expiry renders as UTC with millisecond precision and a Z suffix."""
        from authgate_core.otp import OTPRecord

        record = OTPRecord(otp="1234", country="+1", expire_at=1_700_000_180_123)

        assert record.expire_at_iso == "2023-11-14T22:16:20.123Z"
        assert OTPRecord(otp="1234", country="+1", expire_at=1_700_000_180_000).expire_at_iso == (
            "2023-11-14T22:16:20.000Z"
        )

    def test_keys_do_not_alias(self):
        """A phone and a code with the same digits map to different keys."""
        from authgate_core.otp import code_key, phone_key

        assert phone_key("123456") != code_key("123456")


class TestRequestOTP:
    """Tests for OTP issuance."""

    @pytest.mark.asyncio
    async def test_end_to_end_cache_state(self, make_gateway, cache, clock, notifier):
        """Request writes both entries and sends the code by SMS."""
        from authgate_core.otp import code_key, phone_key

        gateway = make_gateway(codes=[123456])
        now_ms = int(clock() * 1000)

        await gateway.otp.request_otp("5551234", "+1")

        assert await cache.get(phone_key("5551234")) == {
            "otp": "123456",
            "country": "+1",
            "expireAt": now_ms + 180000,
        }
        assert await cache.get(code_key("123456")) == "5551234"
        assert notifier.sms == [
            {"to": "+15551234", "template": "otp-login", "params": {"param1": "123456"}}
        ]

    @pytest.mark.asyncio
    async def test_single_outstanding_otp(self, make_gateway, clock, notifier):
        """A second request before expiry is rejected with the remaining time."""
        from authgate_core.errors import FlowStateError

        gateway = make_gateway(codes=[123456, 654321])
        await gateway.otp.request_otp("5551234", "+1")
        clock.advance(60)

        with pytest.raises(FlowStateError) as exc_info:
            await gateway.otp.request_otp("5551234", "+1")

        assert exc_info.value.code == "OTP_ALREADY_REQUESTED"
        assert exc_info.value.data["remaining"] == 120000
        assert exc_info.value.data["timestamp"] > int(clock() * 1000)
        assert exc_info.value.data["date"].endswith("Z")
        assert len(notifier.sms) == 1

    @pytest.mark.asyncio
    async def test_expiry_releases_slot(self, make_gateway, cache, clock):
        """Once the TTL elapses the phone can request again."""
        from authgate_core.otp import code_key, phone_key

        gateway = make_gateway(codes=[123456, 654321])
        await gateway.otp.request_otp("5551234", "+1")
        clock.advance(181)

        await gateway.otp.request_otp("5551234", "+1")

        assert (await cache.get(phone_key("5551234")))["otp"] == "654321"
        assert await cache.get(code_key("123456")) is None

    @pytest.mark.asyncio
    async def test_record_at_expiry_is_not_outstanding(self, make_gateway, cache, clock, notifier):
        """A cached record whose expireAt has been reached no longer blocks."""
        from authgate_core.otp import OTPRecord, phone_key

        gateway = make_gateway(codes=[654321])
        stale = OTPRecord(otp="123456", country="+1", expire_at=int(clock() * 1000))
        await cache.set(phone_key("5551234"), stale.to_cache(), 60)

        await gateway.otp.request_otp("5551234", "+1")

        assert (await cache.get(phone_key("5551234")))["otp"] == "654321"
        assert len(notifier.sms) == 1

    @pytest.mark.asyncio
    async def test_regenerates_on_collision(self, make_gateway, cache):
        """A code held by another phone is never reissued."""
        from authgate_core.otp import code_key, phone_key

        gateway = make_gateway(codes=[123456, 123456, 777777])
        await gateway.otp.request_otp("5550001", "+1")

        await gateway.otp.request_otp("5550002", "+1")

        assert (await cache.get(phone_key("5550002")))["otp"] == "777777"
        assert await cache.get(code_key("777777")) == "5550002"
        assert await cache.get(code_key("123456")) == "5550001"

    @pytest.mark.asyncio
    async def test_generation_exhausted(self, make_gateway, cache, notifier):
        """Every draw colliding ends in OTP_GENERATION_EXHAUSTED, nothing sent."""
        from authgate_core.errors import OTPGenerationExhaustedError
        from authgate_core.otp import phone_key

        gateway = make_gateway(codes=[123456, 123456, 123456, 123456], otp_max_generation_attempts=3)
        await gateway.otp.request_otp("5550001", "+1")

        with pytest.raises(OTPGenerationExhaustedError) as exc_info:
            await gateway.otp.request_otp("5550002", "+1")

        assert exc_info.value.data == {"attempts": 3}
        assert exc_info.value.status_code == 503
        assert await cache.get(phone_key("5550002")) is None
        assert len(notifier.sms) == 1

    @pytest.mark.asyncio
    async def test_sms_failure_leaves_no_state(self, make_gateway, cache, notifier):
        """If the SMS cannot be sent nothing is cached and the phone may retry."""
        from authgate_core.collaborators.exceptions import ServiceUnavailableError
        from authgate_core.otp import code_key, phone_key

        gateway = make_gateway(codes=[123456, 123456])
        notifier.error = ServiceUnavailableError("down", service="notifications", status_code=503)

        with pytest.raises(ServiceUnavailableError):
            await gateway.otp.request_otp("5551234", "+1")

        assert await cache.get(phone_key("5551234")) is None
        assert await cache.get(code_key("123456")) is None

        notifier.error = None
        await gateway.otp.request_otp("5551234", "+1")
        assert len(notifier.sms) == 1

    @pytest.mark.asyncio
    async def test_missing_config(self, make_gateway, config_provider, notifier):
        """An absent AUTH_CONFIG blob fails closed."""
        from authgate_core.errors import ConfigurationError

        config_provider.put("AUTH_CONFIG", {"auth_phone_otp_template": "otp-login"})
        gateway = make_gateway(codes=[123456])

        with pytest.raises(ConfigurationError) as exc_info:
            await gateway.otp.request_otp("5551234", "+1")

        assert exc_info.value.code == "NEED_OTP_LENGTH_IN_CONFIG"
        assert notifier.sms == []

    @pytest.mark.asyncio
    async def test_custom_lifetime(self, make_gateway, config_provider, cache, clock):
        """otp_expire_time drives both expireAt and the TTL."""
        from authgate_core.otp import phone_key

        config_provider.put("AUTH_CONFIG", {
            "auth_phone_otp_length": 4,
            "auth_phone_otp_template": "otp-login",
            "otp_expire_time": 30000,
        })
        gateway = make_gateway(codes=[4321])
        await gateway.otp.request_otp("5551234", "+1")

        clock.advance(29)
        assert await cache.get(phone_key("5551234")) is not None
        clock.advance(1)
        assert await cache.get(phone_key("5551234")) is None

    def test_rejects_zero_attempt_budget(self, make_gateway):
        """The attempt budget must allow at least one draw."""
        with pytest.raises(ValueError):
            make_gateway(otp_max_generation_attempts=0)


class TestVerifyOTP:
    """Tests for OTP verification."""

    @pytest.mark.asyncio
    async def test_verify_issues_token_and_clears_state(self, make_gateway, cache, directory, tokens):
        """A correct code logs the phone's user in and consumes both entries."""
        from authgate_core.otp import code_key, phone_key

        gateway = make_gateway(codes=[123456])
        await gateway.otp.request_otp("5551234", "+1")

        token = await gateway.otp.verify_otp("5551234", "123456")

        assert token == tokens.issued[0]["token"]
        assert tokens.issued[0]["scope"] == "auth"
        assert await cache.get(phone_key("5551234")) is None
        assert await cache.get(code_key("123456")) is None
        assert directory.create_calls == [{
            "fields": {"phone": "5551234", "phoneCountryCode": "+1", "phoneVerified": True},
            "unique": "phone",
        }]

    @pytest.mark.asyncio
    async def test_verification_is_single_use(self, make_gateway):
        """A consumed code cannot be used again."""
        from authgate_core.errors import FlowStateError

        gateway = make_gateway(codes=[123456])
        await gateway.otp.request_otp("5551234", "+1")
        await gateway.otp.verify_otp("5551234", "123456")

        with pytest.raises(FlowStateError) as exc_info:
            await gateway.otp.verify_otp("5551234", "123456")

        assert exc_info.value.code == "OTP_NOT_REQUESTED"

    @pytest.mark.asyncio
    async def test_wrong_code_keeps_record(self, make_gateway, cache):
        """A mismatch is rejected and the right code still works afterwards."""
        from authgate_core.errors import FlowStateError
        from authgate_core.otp import phone_key

        gateway = make_gateway(codes=[123456])
        await gateway.otp.request_otp("5551234", "+1")

        with pytest.raises(FlowStateError) as exc_info:
            await gateway.otp.verify_otp("5551234", "654321")

        assert exc_info.value.code == "OTP_NOT_VALID"
        assert await cache.get(phone_key("5551234")) is not None
        assert await gateway.otp.verify_otp("5551234", "123456")

    @pytest.mark.asyncio
    async def test_verify_without_request(self, gateway):
        """No outstanding OTP means OTP_NOT_REQUESTED."""
        from authgate_core.errors import FlowStateError

        with pytest.raises(FlowStateError) as exc_info:
            await gateway.otp.verify_otp("5551234", "123456")

        assert exc_info.value.code == "OTP_NOT_REQUESTED"

    @pytest.mark.asyncio
    async def test_verify_after_expiry(self, make_gateway, clock):
        """An evicted record can no longer be verified."""
        from authgate_core.errors import FlowStateError

        gateway = make_gateway(codes=[123456])
        await gateway.otp.request_otp("5551234", "+1")
        clock.advance(180)

        with pytest.raises(FlowStateError) as exc_info:
            await gateway.otp.verify_otp("5551234", "123456")

        assert exc_info.value.code == "OTP_NOT_REQUESTED"

    @pytest.mark.asyncio
    async def test_existing_user_reused(self, make_gateway, directory):
        """A phone that already has a user logs that user in."""
        existing = directory.add(phone="5551234", phoneCountryCode="+1", phoneVerified=True)
        gateway = make_gateway(codes=[123456])
        await gateway.otp.request_otp("5551234", "+1")

        await gateway.otp.verify_otp("5551234", "123456")

        assert list(directory.users) == [existing.id]

    @pytest.mark.asyncio
    async def test_directory_failure_keeps_record(self, make_gateway, directory, cache):
        """A failed user upsert propagates and the code stays usable."""
        from authgate_core.collaborators.exceptions import ServiceUnavailableError
        from authgate_core.otp import phone_key

        gateway = make_gateway(codes=[123456])
        await gateway.otp.request_otp("5551234", "+1")
        directory.create_error = ServiceUnavailableError("down", service="directory", status_code=503)

        with pytest.raises(ServiceUnavailableError):
            await gateway.otp.verify_otp("5551234", "123456")

        assert await cache.get(phone_key("5551234")) is not None

    @pytest.mark.asyncio
    async def test_login_event_published(self, make_gateway, events):
        """Verification publishes a user.login event for the phone strategy."""
        from authgate_core.events import USER_LOGIN

        received = []
        events.subscribe(USER_LOGIN, received.append)
        gateway = make_gateway(codes=[123456])
        await gateway.otp.request_otp("5551234", "+1")

        token = await gateway.otp.verify_otp("5551234", "123456")

        assert len(received) == 1
        assert received[0].strategy == "phone"
        assert received[0].token == token
        assert received[0].user.phone == "5551234"
