"""DTOs for the Users API wire format and the profile page view."""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities.profile import ProfileRecord
from src.domain.services.birth_date import to_display_date, to_timestamp


class UserRecordIn(BaseModel):
    """Profile record as returned by ``GET /api/users``."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    nombre: Optional[str] = Field(None, description="First name")
    apellido: Optional[str] = Field(None, description="Last name")
    email: Optional[str] = Field(None, description="Email address")
    telefono: Optional[str] = Field(None, description="Phone number")
    lugar_residencia: Optional[str] = Field(None, alias="lugarResidencia", description="Residence location")
    fecha_nacimiento: Optional[str] = Field(None, alias="fechaNacimiento", description="Birth date as an ISO-8601 timestamp")

    def to_record(self) -> ProfileRecord:
        return ProfileRecord(
            first_name=self.nombre or "",
            last_name=self.apellido or "",
            email=self.email or "",
            phone=self.telefono or "",
            residence=self.lugar_residencia or "",
            birth_date=to_display_date(self.fecha_nacimiento),
        )


class UserRecordOut(BaseModel):
    """Body of ``POST /api/users``."""
    model_config = ConfigDict(populate_by_name=True)

    nombre: str
    apellido: str
    email: str
    telefono: str
    lugar_residencia: str = Field(..., alias="lugarResidencia")
    fecha_nacimiento: str = Field(..., alias="fechaNacimiento", example="1990-05-14T00:00:00.000Z")
    wallet: str = Field(..., description="Wallet address the record belongs to")
    owner: str = Field(..., description="Wallet address of the record owner")

    @classmethod
    def from_record(cls, record: ProfileRecord, wallet_address: str) -> UserRecordOut:
        return cls(
            nombre=record.first_name,
            apellido=record.last_name,
            email=record.email,
            telefono=record.phone,
            lugar_residencia=record.residence,
            fecha_nacimiento=to_timestamp(record.birth_date),
            wallet=wallet_address,
            owner=wallet_address,
        )

    def to_wire(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


class ProfileFormFields(BaseModel):
    """Editable fields of the profile form."""
    first_name: str = Field("", description="First name", example="Ana")
    last_name: str = Field("", description="Last name", example="García")
    email: str = Field("", description="Email address", example="ana@example.com")
    phone: str = Field("", description="Phone number")
    residence: str = Field("", description="Residence location")
    birth_date: str = Field("", description="Birth date as YYYY-MM-DD", example="1990-05-14")

    @classmethod
    def from_record(cls, record: ProfileRecord) -> ProfileFormFields:
        return cls(**record.as_dict())

    def to_record(self) -> ProfileRecord:
        return ProfileRecord(**self.model_dump())


class ProfileViewResponse(BaseModel):
    """What the profile page currently shows."""
    state: Literal["unauthenticated", "loading", "ready"] = Field(..., description="Render state of the page")
    wallet_label: str = Field("", description="Shortened wallet address shown in the header", example="0xABC123...")
    form: ProfileFormFields | None = Field(None, description="Form values, present only in the ready state")


class SaveProfileResponse(BaseModel):
    """Result of a profile save."""
    ok: bool = Field(..., description="Whether the Users API accepted the write")
    message: str = Field(..., description="Notification shown to the user", example="Profile saved successfully!")
