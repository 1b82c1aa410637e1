from pydantic import BaseModel, EmailStr, Field, field_validator, computed_field
from typing import Optional
from datetime import date, datetime

MIN_BIRTH_DATE = date(1900, 1, 1)


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _check_birth_date(value: Optional[date]) -> Optional[date]:
    if value is None:
        return value
    if value > date.today():
        raise ValueError("birth_date cannot be in the future")
    if value < MIN_BIRTH_DATE:
        raise ValueError("birth_date cannot be before 1900-01-01")
    return value


class ProfileBase(BaseModel):
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    height: Optional[int] = Field(default=None, gt=0)  # cm
    weight: Optional[int] = Field(default=None, gt=0)  # kg
    address: Optional[str] = None
    avatar_url: Optional[str] = None

    @field_validator("phone", "address", "avatar_url", "birth_date", "height", "weight", mode="before")
    @classmethod
    def empty_as_null(cls, value):
        return _blank_to_none(value)

    @field_validator("birth_date")
    @classmethod
    def birth_date_in_range(cls, value):
        return _check_birth_date(value)


class ProfileCreate(ProfileBase):
    full_name: str = Field(min_length=1)
    email: EmailStr

    @field_validator("full_name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class ProfileUpdate(ProfileBase):
    full_name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None

    @field_validator("full_name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class ProfileResponse(BaseModel):
    id: str
    full_name: str
    email: str
    phone: Optional[str] = None
    birth_date: Optional[date] = None
    height: Optional[int] = None
    weight: Optional[int] = None
    address: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def age(self) -> Optional[int]:
        # Year difference, as shown on the profile card
        if self.birth_date is None:
            return None
        return date.today().year - self.birth_date.year

    class Config:
        from_attributes = True


class AvatarUploadResponse(BaseModel):
    path: str
    avatar_url: str
