"""
Database Schemas

MongoDB collection schemas and API payloads, defined as Pydantic models.

Each collection model maps to a lowercase collection name:
- Account -> "account" collection (login credentials and session tokens)
- User -> "user" collection (the traveller / admin profile)
- Trip -> "trip" collection (a generated itinerary, stored as a JSON blob)

The Itinerary model mirrors the JSON the language model is asked to return,
so its wire keys stay camelCase.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

Role = Literal["user", "admin"]
Trend = Literal["increment", "decrement", "no change"]


# ----------------------
# Collections
# ----------------------

class Account(BaseModel):
    """
    Accounts collection schema
    Collection name: "account"
    """
    name: str = Field(..., description="Full name")
    email: EmailStr = Field(..., description="Email address")
    password_hash: str = Field(..., description="Hashed password")
    salt: str = Field(..., description="Per-account salt")
    image_url: Optional[str] = Field(None, description="Avatar URL copied to the profile")
    tokens: List[str] = Field(default_factory=list, description="Active session tokens")


class User(BaseModel):
    """
    Profile of a signed-in person. Collection name: "user"
    """
    account_id: str = Field(..., description="ID of the owning account as string")
    name: str = Field(..., description="Display name")
    email: EmailStr = Field(..., description="Email address")
    image_url: Optional[str] = Field(None, description="Avatar URL")
    joined_at: str = Field(..., description="ISO-8601 UTC timestamp of the first login")
    status: Role = Field("user", description="Role flag: user or admin")


class Trip(BaseModel):
    """
    Generated itineraries. Collection name: "trip"
    """
    trip_detail: str = Field(..., description="Itinerary serialized as JSON")
    created_at: str = Field(..., description="ISO-8601 UTC creation timestamp")
    image_urls: List[Optional[str]] = Field(default_factory=list, max_length=3)
    user_id: str = Field(..., description="ID of the account that requested the trip")


# ----------------------
# Itinerary (model output)
# ----------------------

class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )


class Activity(_CamelModel):
    time: str = ""
    title: str = ""
    description: str = ""
    cost: Optional[str] = None
    tips: Optional[str] = None


class Meals(_CamelModel):
    breakfast: Optional[str] = None
    lunch: Optional[str] = None
    dinner: Optional[str] = None


class DayPlan(_CamelModel):
    day: Union[int, str] = 0
    location: str = ""
    theme: str = ""
    activities: List[Activity] = Field(default_factory=list)
    meals: Optional[Meals] = None
    accommodation: Optional[str] = None
    daily_total: Optional[str] = None


class TripLocation(_CamelModel):
    city: Optional[str] = None
    coordinates: List[float] = Field(default_factory=list)
    open_street_map: Optional[str] = None


class Itinerary(_CamelModel):
    name: str = ""
    description: str = ""
    estimated_price: str = ""
    duration: Union[int, str] = 0
    budget: str = ""
    travel_style: str = ""
    country: str = ""
    interests: Union[str, List[str]] = ""
    group_type: str = ""
    best_time_to_visit: List[str] = Field(default_factory=list)
    weather_info: List[str] = Field(default_factory=list)
    location: Optional[TripLocation] = None
    budget_breakdown: Dict[str, Any] = Field(default_factory=dict)
    itinerary: List[DayPlan] = Field(..., min_length=1)
    local_tips: List[str] = Field(default_factory=list)
    packing_essentials: List[str] = Field(default_factory=list)


# ----------------------
# Requests
# ----------------------

class RegisterRequest(BaseModel):
    name: str
    email: EmailStr
    password: str
    image_url: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TripFormData(BaseModel):
    """Trip preferences as posted by the planner form.

    Fields default to empty values so that an incomplete form still parses and
    can be answered with a readable message instead of a schema error.
    """
    model_config = ConfigDict(populate_by_name=True)

    country: str = ""
    duration: int = Field(0, alias="numberOfDays")
    travel_style: str = Field("", alias="travelStyle")
    interests: Union[str, List[str]] = ""
    budget: str = ""
    group_type: str = Field("", alias="groupType")

    @field_validator("country", "travel_style", "interests", "budget", "group_type", mode="before")
    @classmethod
    def null_as_blank(cls, value):
        return "" if value is None else value

    @field_validator("duration", mode="before")
    @classmethod
    def blank_duration_as_zero(cls, value):
        if value is None or isinstance(value, bool):
            return 0
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return 0
        if isinstance(value, float):
            return int(value) if value.is_integer() else 0
        return value


# ----------------------
# Responses
# ----------------------

class AuthResponse(BaseModel):
    token: str
    name: str
    email: EmailStr


class TrendResult(BaseModel):
    trend: Trend
    percentage: float


class MonthlyCount(BaseModel):
    current_month: int
    last_month: int


class RoleCount(MonthlyCount):
    total: int


class DashboardStats(BaseModel):
    total_users: int
    users_joined: MonthlyCount
    user_role: RoleCount
    total_trips: int
    trips_created: MonthlyCount


class StatsCard(BaseModel):
    header_title: str
    total: int
    current_month_count: int
    last_month_count: int
    trend: Trend
    percentage: float


class TripCard(BaseModel):
    id: str
    name: str
    location: str
    image_url: str
    tags: List[str]
    price: str


class Country(BaseModel):
    name: str
    coordinates: List[float] = Field(default_factory=list)
    value: str
    open_street_map: Optional[str] = None
