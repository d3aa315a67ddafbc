"""Modelos Pydantic (schemas) para validación de datos de entrada/salida en el Bank Service."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- Schemas de Usuario ---

class UserCreate(BaseModel):
    """Schema para los datos requeridos al registrar un nuevo usuario."""
    email: str = Field(..., min_length=3, max_length=255)
    # Sin límite superior: bcrypt solo usa los primeros 72 bytes y passlib trunca el resto
    password: str = Field(..., min_length=1)
    is_banker: bool = Field(False, alias="isBanker")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("email")
    @classmethod
    def email_must_look_valid(cls, value: str) -> str:
        value = value.strip()
        local, sep, domain = value.partition("@")
        if not sep or not local or "." not in domain:
            raise ValueError("email must look like user@domain.tld")
        return value


class LoginRequest(BaseModel):
    """Schema para las credenciales de inicio de sesión."""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def strip_email(cls, value: str) -> str:
        return value.strip()


class MessageResponse(BaseModel):
    """Respuesta genérica con un mensaje (éxito o error)."""
    message: str


# --- Schemas de Token ---

class Token(BaseModel):
    """Schema para el token de acceso JWT devuelto tras un login exitoso."""
    access_token: str = Field(..., alias="accessToken")

    model_config = ConfigDict(populate_by_name=True)


class TokenClaims(BaseModel):
    """Identidad contenida en el token: id de usuario y email."""
    user_id: int = Field(..., alias="userId")
    email: str

    model_config = ConfigDict(populate_by_name=True, frozen=True)
