from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Any

from app.models.entities import PetSize

# --- Incoming Request Models ---

class SearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pet_size: Optional[PetSize] = Field(default=None, alias="petSize")
    from_: Optional[int] = Field(default=None, alias="from")
    to: Optional[int] = None
    radius_km: Optional[float] = Field(default=None, alias="radiusKm") # accepted, not used for ranking yet

class CreateBookingRequest(BaseModel):
    # All optional so missing fields surface as the same 400 envelope as a bad range
    model_config = ConfigDict(populate_by_name=True)

    host_id: Optional[str] = Field(default=None, alias="hostId")
    user_id: Optional[str] = Field(default=None, alias="userId")
    from_: Optional[int] = Field(default=None, alias="from")
    to: Optional[int] = None

class CreateUserRequest(BaseModel):
    name: Optional[str] = None

class CreateChatRequest(BaseModel):
    title: Optional[str] = None

class SendMessageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(default=None, alias="userId")
    text: Optional[str] = None

# --- Outgoing Response Models ---

class ApiResponse(BaseModel):
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None

def ok(data: Any = None) -> dict:
    body = ApiResponse(success=True, data=data).model_dump(mode="json", by_alias=True)
    body.pop("error")
    return body

def bad(error: str) -> dict:
    return ApiResponse(success=False, error=error).model_dump(exclude={"data"})
