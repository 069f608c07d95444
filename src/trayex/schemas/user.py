"""Account and profile Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

MIN_PASSWORD_LENGTH = 8


class ProfileFields(BaseModel):
    """Editable student profile attributes."""

    full_name: str | None = Field(None, description="Student's full name")
    blood_type: str | None = Field(None, max_length=8)
    id_number: str | None = Field(None, max_length=64, description="University or national id")
    university: str | None = None
    emergency_name: str | None = Field(None, description="Emergency contact name")
    emergency_contact: str | None = Field(None, description="Emergency contact phone")


class RegisterRequest(ProfileFields):
    """Schema for student self-registration."""

    email: str | None = Field(None, description="Login email")
    phone: str | None = Field(None, description="Login phone number")
    password: str = Field(..., description="Plain-text password (min 8 characters)")

    @model_validator(mode="after")
    def _require_contact(self) -> "RegisterRequest":
        if not (self.email or self.phone):
            raise ValueError("email or phone is required")
        return self


class LoginRequest(BaseModel):
    """Schema for email + password login."""

    email: str = Field(..., description="Login email")
    password: str = Field(..., description="Plain-text password")


class ProfileResponse(ProfileFields):
    """Student profile as returned to its owner."""

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    """Public account fields."""

    id: str
    email: str | None = None
    phone: str | None = None
    role: str
    student: ProfileResponse | None = None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Response returned after registration or login."""

    user: UserResponse
    token: str = Field(..., description="Bearer session token")


class MeResponse(BaseModel):
    """Current account."""

    user: UserResponse


class ProfileEnvelope(BaseModel):
    """Account plus profile for the profile screen."""

    user: UserResponse
    profile: ProfileResponse | None = None


class RefreshResponse(BaseModel):
    """Freshly issued session token."""

    token: str
