"""
API Schemas
===========
Request bodies and the response envelope of the auth endpoints.

Field constraints here are the input preconditions of the flows; a body
that fails them never reaches an engine.
"""

from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, EmailStr, Field

Password = Annotated[str, Field(min_length=6, max_length=255)]
Name = Annotated[str, Field(max_length=255)]
Phone = Annotated[str, Field(min_length=1, max_length=32)]
Username = Annotated[str, Field(min_length=1, max_length=255)]


class PhoneRequestBody(BaseModel):
    phone: Phone
    country: str = Field(pattern=r"^\+\d{1,3}$", max_length=4)


class PhoneVerifyBody(BaseModel):
    phone: Phone
    otp: str = Field(pattern=r"^[0-9]{4,10}$")


class ForgetRequestBody(BaseModel):
    email: EmailStr


class ForgetChangeBody(BaseModel):
    token: str = Field(min_length=1)
    password: Password


class EmailRegisterBody(BaseModel):
    email: EmailStr
    password: Password
    firstname: Optional[Name] = None
    lastname: Optional[Name] = None
    fullname: Optional[Name] = None


class EmailLoginBody(BaseModel):
    email: EmailStr
    password: Password


class UsernameRegisterBody(BaseModel):
    username: Username
    password: Password
    email: Optional[EmailStr] = None
    firstname: Optional[Name] = None
    lastname: Optional[Name] = None
    fullname: Optional[Name] = None


class UsernameLoginBody(BaseModel):
    username: Username
    password: Password


class UsernameForgetBody(BaseModel):
    username: Username


class ApiResponse(BaseModel):
    """Envelope shared by every success and failure response."""

    code: int = 200
    i18n: str
    data: Optional[Dict[str, Any]] = None
