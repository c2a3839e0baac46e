from typing import Optional, List, Literal, Generic, TypeVar
from pydantic import BaseModel, ConfigDict, Field, model_validator

PetSize = Literal["small", "medium", "large"]
ServiceType = Literal["boarding", "daycare", "walking"]
BookingStatus = Literal["pending", "confirmed", "cancelled", "rejected"]

class Record(BaseModel):
    # Stored and sent as camelCase JSON, attributes stay snake_case
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")

# --- Users & Chats ---

class User(Record):
    name: str = ""
    avatar: Optional[str] = None

class ChatMessage(Record):
    chat_id: str = Field(alias="chatId")
    user_id: str = Field(alias="userId")
    text: str
    ts: int # epoch millis

class Chat(Record):
    title: str = ""

class ChatBoardState(Chat):
    messages: List[ChatMessage] = Field(default_factory=list)

# --- Hosts ---

class Availability(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: int # epoch millis for the start of the day
    is_available: bool = Field(alias="isAvailable")

class Location(BaseModel):
    city: str = ""
    # For demo map, 0-1
    x: float = 0
    y: float = 0

class Host(Record):
    name: str = ""
    avatar: Optional[str] = None
    bio: str = ""
    rating: float = 0
    reviews_count: int = Field(default=0, alias="reviewsCount")
    tags: List[ServiceType] = Field(default_factory=list)
    price_per_night: float = Field(default=0, alias="pricePerNight")
    location: Location = Field(default_factory=Location)
    availability: List[Availability] = Field(default_factory=list)
    verified: bool = False
    house_rules: List[str] = Field(default_factory=list, alias="houseRules")
    gallery: List[str] = Field(default_factory=list)
    allowed_pet_sizes: List[PetSize] = Field(default_factory=list, alias="allowedPetSizes")

class HostPreview(Record):
    name: str
    avatar: Optional[str] = None
    price_per_night: float = Field(alias="pricePerNight")
    rating: float
    tags: List[ServiceType]
    location: Location
    score: Optional[float] = None

    @classmethod
    def from_host(cls, host: Host) -> "HostPreview":
        return cls(
            id=host.id,
            name=host.name,
            avatar=host.avatar,
            price_per_night=host.price_per_night,
            rating=host.rating,
            tags=host.tags,
            location=host.location,
            score=host.rating * 100 + host.reviews_count,
        )

# --- Bookings ---

class Booking(Record):
    """Half-open stay [from, to) in epoch millis."""
    host_id: str = Field(default="", alias="hostId")
    user_id: str = Field(default="", alias="userId")
    from_: int = Field(default=0, alias="from")
    to: int = 0
    status: BookingStatus = "pending"
    created_at: int = Field(default=0, alias="createdAt")

    @model_validator(mode="after")
    def check_interval(self) -> "Booking":
        if self.from_ >= self.to:
            raise ValueError("booking 'from' must be before 'to'")
        return self

class BookingWithHost(Booking):
    host: Optional[Host] = None

# --- Listing ---

T = TypeVar("T")

class Page(BaseModel, Generic[T]):
    items: List[T]
    next: Optional[str] = None
