from pydantic import AfterValidator, BaseModel, field_validator, model_validator
from typing import Annotated
import re

from app.config.settings import settings

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _check_email(value: str) -> str:
    value = (value or "").strip()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Please enter a valid email address.")
    return value


EmailAddress = Annotated[str, AfterValidator(_check_email)]


class LoginRequest(BaseModel):
    email: EmailAddress
    password: str

    @field_validator("password")
    @classmethod
    def password_present(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required.")
        return value


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    message: str = "Logged in successfully!"


class RegisterRequest(BaseModel):
    full_name: str
    email: EmailAddress
    password: str
    accept_terms: bool = False

    @field_validator("full_name")
    @classmethod
    def name_present(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Name is required.")
        return value.strip()

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        if len(value or "") < settings.min_password_length:
            raise ValueError(f"Password must be at least {settings.min_password_length} characters.")
        return value

    @model_validator(mode="after")
    def terms_accepted(self):
        if settings.signup_requires_terms and not self.accept_terms:
            raise ValueError("You must accept the terms of service.")
        return self


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    message: str


class EmailRequest(BaseModel):
    email: EmailAddress


class MessageResponse(BaseModel):
    message: str
