"""
OTP service tests: validation before issuance, dispatch, rollback on failure
"""
import asyncio

import pytest

from smsotp.core.errors import (
    DeliveryFailed,
    InvalidPhoneFormat,
    OTPMismatch,
    OTPNotFound,
)
from smsotp.services.otp_manager import OTPManager
from smsotp.services.otp_service import OTPService, build_otp_message
from tests.helpers.otp_fakes import RecordingSender


def test_message_body_format():
    assert build_otp_message("123456") == "Your OTP is: 123456. Valid for 5 minutes."


@pytest.mark.asyncio
async def test_send_then_verify_happy_path(service, sender, manager, phone):
    await service.send_otp(phone)

    assert len(sender.messages) == 1
    destination, _ = sender.messages[0]
    assert destination == phone

    code = sender.last_code()
    assert manager.peek(phone).code == code

    await service.verify_otp(phone, code)
    with pytest.raises(OTPNotFound):
        await service.verify_otp(phone, code)


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_phone", ["12345", "+1234", "15551234567", None, 15551234567])
async def test_invalid_phone_rejected_before_generation(service, sender, store, bad_phone, monkeypatch):
    def _must_not_generate(cls):
        raise AssertionError("code generated for invalid phone")

    monkeypatch.setattr(OTPManager, "generate_code", classmethod(_must_not_generate))

    with pytest.raises(InvalidPhoneFormat):
        await service.send_otp(bad_phone)

    assert sender.messages == []
    assert len(store) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("mode", ["raise", "crash", "decline"])
async def test_delivery_failure_rolls_back(manager, store, phone, mode):
    sender = RecordingSender(mode=mode)
    service = OTPService(manager=manager, sender=sender, dispatch_timeout=0.2)

    with pytest.raises(DeliveryFailed):
        await service.send_otp(phone)

    # The generated code was attempted but is no longer usable
    assert len(sender.messages) == 1
    assert manager.peek(phone) is None
    with pytest.raises(OTPNotFound):
        await service.verify_otp(phone, sender.last_code())


@pytest.mark.asyncio
async def test_delivery_timeout_is_delivery_failed(manager, phone):
    sender = RecordingSender(mode="hang")
    service = OTPService(manager=manager, sender=sender, dispatch_timeout=0.05)

    with pytest.raises(DeliveryFailed):
        await service.send_otp(phone)

    assert manager.peek(phone) is None


@pytest.mark.asyncio
async def test_cancelled_dispatch_rolls_back(manager, phone):
    sender = RecordingSender(mode="hang")
    service = OTPService(manager=manager, sender=sender, dispatch_timeout=5)

    task = asyncio.create_task(service.send_otp(phone))
    for _ in range(100):
        if sender.messages:
            break
        await asyncio.sleep(0.01)
    assert manager.peek(phone) is not None

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert manager.peek(phone) is None
    with pytest.raises(OTPNotFound):
        await service.verify_otp(phone, sender.last_code())


def test_explicit_dispatch_timeout_kept(manager, sender):
    assert OTPService(manager=manager, sender=sender, dispatch_timeout=0).dispatch_timeout == 0
    assert OTPService(manager=manager, sender=sender).dispatch_timeout == 15.0


@pytest.mark.asyncio
async def test_retry_after_delivery_failure(manager, phone):
    sender = RecordingSender(mode="raise")
    service = OTPService(manager=manager, sender=sender, dispatch_timeout=0.2)

    with pytest.raises(DeliveryFailed):
        await service.send_otp(phone)

    sender.mode = "ok"
    await service.send_otp(phone)
    await service.verify_otp(phone, sender.last_code())


@pytest.mark.asyncio
async def test_failed_dispatch_does_not_discard_newer_issue(manager, phone, monkeypatch):
    """A slow failing send must not delete a record issued after it"""
    codes = iter(["111111", "222222"])
    monkeypatch.setattr(OTPManager, "generate_code", classmethod(lambda cls: next(codes)))

    class ReissuingSender(RecordingSender):
        async def send(self, destination, body):
            self.messages.append((destination, body))
            # Another request re-issues while this dispatch is in flight
            manager.issue(destination)
            return False

    service = OTPService(manager=manager, sender=ReissuingSender(), dispatch_timeout=0.2)

    with pytest.raises(DeliveryFailed):
        await service.send_otp(phone)

    assert manager.peek(phone).code == "222222"


@pytest.mark.asyncio
async def test_resend_invalidates_previous_code(service, sender, phone):
    await service.send_otp(phone)
    first = sender.last_code()
    await service.send_otp(phone)
    second = sender.last_code()

    if first != second:
        with pytest.raises(OTPMismatch):
            await service.verify_otp(phone, first)
    await service.verify_otp(phone, second)
