"""Pydantic schemas shared by services, routes and the session store."""

from pydantic import BaseModel, ConfigDict, Field


class ProfileData(BaseModel):
    """Profile attributes copied into the session."""

    model_config = ConfigDict(from_attributes=True)

    full_name: str | None = None
    email_address: str | None = None
    mobile_number: str | None = None


class LoggedUser(BaseModel):
    """The authenticated user's record as held in the session under ``loggeduser``."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    profile: ProfileData | None = None


class RegistrationForm(BaseModel):
    """Fields submitted by the registration form."""

    username: str = Field(..., min_length=1, max_length=100)
    password: str = ""
    full_name: str | None = Field(default=None, max_length=255)
    email_address: str | None = Field(default=None, max_length=255)
    mobile_number: str | None = Field(default=None, max_length=32)

