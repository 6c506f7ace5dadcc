"""
Auth Router
===========
HTTP endpoints of the authentication flows.

Handlers only translate between the wire format and the gateway: engines
raise on failure and the exception handlers render the envelope.
"""

from fastapi import APIRouter, Depends, Query

from ..gateway import AuthGateway
from .dependencies import get_creator
from .schemas import (
    ApiResponse,
    EmailLoginBody,
    EmailRegisterBody,
    ForgetChangeBody,
    ForgetRequestBody,
    PhoneRequestBody,
    PhoneVerifyBody,
    UsernameForgetBody,
    UsernameLoginBody,
    UsernameRegisterBody,
)


def _token_response(token: str) -> ApiResponse:
    return ApiResponse(i18n="LOGGEDIN_SUCCESSFULLY", data={"token": token})


def create_auth_router(gateway: AuthGateway) -> APIRouter:
    """Build the auth router bound to ``gateway``."""
    router = APIRouter(tags=["auth"])

    # Phone OTP

    @router.post("/phone/request", response_model=ApiResponse, response_model_exclude_none=True)
    async def phone_request(body: PhoneRequestBody):
        await gateway.otp.request_otp(body.phone, body.country)
        return ApiResponse(i18n="OTP_SENT")

    @router.post("/phone/verify", response_model=ApiResponse, response_model_exclude_none=True)
    async def phone_verify(body: PhoneVerifyBody):
        token = await gateway.otp.verify_otp(body.phone, body.otp)
        return _token_response(token)

    # Password reset

    @router.post("/forget/request", response_model=ApiResponse, response_model_exclude_none=True)
    async def forget_request(body: ForgetRequestBody, creator: str = Depends(get_creator)):
        await gateway.reset.request_reset(body.email, creator)
        return ApiResponse(i18n="FORGET_REQUEST_EMAIL_SENT")

    @router.post("/forget/change", response_model=ApiResponse, response_model_exclude_none=True)
    async def forget_change(body: ForgetChangeBody, creator: str = Depends(get_creator)):
        await gateway.reset.redeem_reset(body.token, body.password, creator)
        return ApiResponse(i18n="PASSWORD_CHANGED")

    # Email/password

    @router.post("/email/register", response_model=ApiResponse, response_model_exclude_none=True)
    async def email_register(body: EmailRegisterBody):
        await gateway.email.register(
            body.email,
            body.password,
            firstname=body.firstname,
            lastname=body.lastname,
            fullname=body.fullname,
        )
        return ApiResponse(i18n="REGISTERED_SUCCESSFULLY")

    @router.post("/email/login", response_model=ApiResponse, response_model_exclude_none=True)
    async def email_login(body: EmailLoginBody):
        token = await gateway.email.login(body.email, body.password)
        return _token_response(token)

    # Username/password

    @router.post("/username/register", response_model=ApiResponse, response_model_exclude_none=True)
    async def username_register(body: UsernameRegisterBody):
        await gateway.username.register(
            body.username,
            body.password,
            email=body.email,
            firstname=body.firstname,
            lastname=body.lastname,
            fullname=body.fullname,
        )
        return ApiResponse(i18n="REGISTERED_SUCCESSFULLY")

    @router.post("/username/login", response_model=ApiResponse, response_model_exclude_none=True)
    async def username_login(body: UsernameLoginBody):
        token = await gateway.username.login(body.username, body.password)
        return _token_response(token)

    @router.post("/username/forget", response_model=ApiResponse, response_model_exclude_none=True)
    async def username_forget(body: UsernameForgetBody, creator: str = Depends(get_creator)):
        await gateway.username.forget(body.username, creator)
        return ApiResponse(i18n="FORGET_REQUEST_EMAIL_SENT")

    # Identity

    @router.get("/whoisthis")
    async def whoisthis(identity: int = Query(..., ge=1)):
        user = await gateway.identity.whoisthis(identity)
        return user.model_dump(exclude_none=True)

    return router
