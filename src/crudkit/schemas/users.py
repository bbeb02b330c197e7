from pydantic import EmailStr, Field

from .base import InputSchema, PartialUpdateSchema


class UserRegister(InputSchema):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)


class UserLogin(InputSchema):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class UserUpdate(PartialUpdateSchema):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=8, max_length=128)
