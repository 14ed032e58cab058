from pydantic import BaseModel, ConfigDict, Field

from typing import Optional


# Users / auth
class UserCreate(BaseModel):
    username: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class UserLogin(BaseModel):
    email: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class PasswordReset(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    new_password: str = Field(..., min_length=1, alias="newPassword")


class MessageResponse(BaseModel):
    message: str


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str


# Pharmacies
class PharmacyCreate(BaseModel):
    """Payload for registering a pharmacy. Accepts camelCase or snake_case keys."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    phone: str
    city: str
    detailed_address: str = Field(..., alias="detailedAddress")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    email: str = Field(..., min_length=3)
    is_on_duty: bool = Field(False, alias="isOnDuty")
    is_on_gard: bool = Field(False, alias="isOnGard")
    description: Optional[str] = None
    image: Optional[str] = None
    image_mobile: Optional[str] = Field(None, alias="imageMobile")


class PharmacyUpdate(BaseModel):
    """Partial update; only fields present in the request are applied."""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    city: Optional[str] = None
    detailed_address: Optional[str] = Field(None, alias="detailedAddress")
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    email: Optional[str] = Field(None, min_length=3)
    is_on_duty: Optional[bool] = Field(None, alias="isOnDuty")
    is_on_gard: Optional[bool] = Field(None, alias="isOnGard")
    description: Optional[str] = None
    image: Optional[str] = None
    image_mobile: Optional[str] = Field(None, alias="imageMobile")

    def changes(self) -> dict:
        """Fields the client sent, keyed by column name. Only optional columns may be cleared with null."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in CLEARABLE_PHARMACY_FIELDS
        }


CLEARABLE_PHARMACY_FIELDS = {"description", "image", "image_mobile"}


class PharmacyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    phone: str
    city: str
    detailed_address: str = Field(..., alias="detailedAddress")
    latitude: float
    longitude: float
    email: str
    is_on_duty: bool = Field(..., alias="isOnDuty")
    is_on_gard: bool = Field(..., alias="isOnGard")
    description: Optional[str] = None
    image: Optional[str] = None
    image_mobile: Optional[str] = Field(None, alias="imageMobile")
    # metres from the requested coordinate, geo queries only
    distance: Optional[float] = Field(None, ge=0)


class DeleteResponse(BaseModel):
    deleted: bool
