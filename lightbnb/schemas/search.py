from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator, model_validator
from typing import Optional
from lightbnb.config import settings

class SearchFilter(BaseModel):
    """Optional property search criteria.

    Accepts the search form's field names (``minimum_price_per_night`` and
    friends) as well as the short ones. Every criterion left as ``None``
    places no constraint on the results. Unknown keys are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    city: Optional[str] = None
    owner_id: Optional[int] = None
    min_price: Optional[Decimal] = Field(
        default=None, ge=0, validation_alias=AliasChoices("min_price", "minimum_price_per_night")
    )
    max_price: Optional[Decimal] = Field(
        default=None, ge=0, validation_alias=AliasChoices("max_price", "maximum_price_per_night")
    )
    min_rating: Optional[float] = Field(
        default=None, ge=0, le=5, validation_alias=AliasChoices("min_rating", "minimum_rating")
    )
    limit: int = Field(default_factory=lambda: settings.DEFAULT_SEARCH_LIMIT, gt=0)

    @field_validator("min_price", "max_price", mode="before")
    @classmethod
    def float_price_as_written(cls, value):
        # 1.1 means Decimal("1.1"), not its binary expansion
        if isinstance(value, float):
            return Decimal(str(value))
        return value

    @field_validator("city")
    @classmethod
    def strip_city(cls, value):
        if value is None:
            return None
        value = value.strip()
        return value or None

    @model_validator(mode="after")
    def check_price_range(self):
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("min_price must not exceed max_price")
        return self
