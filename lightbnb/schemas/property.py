from pydantic import BaseModel, Field, AliasChoices
from typing import Optional

class PropertyCreate(BaseModel):
    owner_id: int
    title: str
    description: Optional[str] = None
    thumbnail_photo_url: Optional[str] = None
    cover_photo_url: Optional[str] = None
    cost_per_night: int = Field(ge=0)
    street: Optional[str] = None
    city: str
    # The listing form posts this field as "provence"
    province: Optional[str] = Field(default=None, validation_alias=AliasChoices("province", "provence"))
    post_code: Optional[str] = None
    country: Optional[str] = None
    parking_spaces: int = Field(default=0, ge=0)
    number_of_bathrooms: int = Field(default=0, ge=0)
    number_of_bedrooms: int = Field(default=0, ge=0)

class Property(PropertyCreate):
    id: int

class PropertyWithRating(Property):
    average_rating: Optional[float] = None
