from datetime import datetime
from pydantic import BaseModel, Field

from ngohub.models.common import new_id, utcnow


class ResourceLocation(BaseModel):
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None

class ResourceContact(BaseModel):
    phone: list[str] = Field(default_factory=list)
    email: str | None = None
    website: str | None = None

class Resource(BaseModel):
    resource_id: str = Field(default_factory=new_id)
    name: str
    category: str
    type: str | None = None  # Government, Private, NGO, ...
    description: str | None = None
    location: ResourceLocation = Field(default_factory=ResourceLocation)
    contact: ResourceContact = Field(default_factory=ResourceContact)
    specializations: list[str] = Field(default_factory=list)
    facilities: list[str] = Field(default_factory=list)
    working_hours: str | None = None
    is_verified: bool = False

    created_at: datetime = Field(default_factory=utcnow)
