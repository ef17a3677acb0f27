"""Parameterized SQL for property search.

The query is assembled from the optional criteria of a :class:`SearchFilter`.
Every value is bound as a positional ``$n`` parameter, numbered in the order
the criteria are evaluated: city, owner, price range, rating, and finally the
limit.
"""
from dataclasses import dataclass, field
from typing import Any, List, Union

from pydantic import ValidationError

from lightbnb.config import settings
from lightbnb.errors import InvalidFilter
from lightbnb.schemas.search import SearchFilter

BASE_QUERY = """SELECT properties.*, avg(property_reviews.rating) AS average_rating
FROM properties
JOIN property_reviews ON properties.id = property_reviews.property_id"""

@dataclass(frozen=True)
class PropertySearchQuery:
    text: str
    parameters: List[Any]

@dataclass
class _Predicates:
    clauses: List[str] = field(default_factory=list)
    parameters: List[Any] = field(default_factory=list)

    def bind(self, value) -> str:
        self.parameters.append(value)
        return f"${len(self.parameters)}"

    def add(self, clause: str):
        self.clauses.append(clause)

    def where(self) -> str:
        if not self.clauses:
            return ""
        return "WHERE " + " AND ".join(self.clauses)

@dataclass(frozen=True)
class GroupOnly:
    def render(self, predicates: _Predicates) -> str:
        return "GROUP BY properties.id"

@dataclass(frozen=True)
class GroupWithHaving:
    threshold: float

    def render(self, predicates: _Predicates) -> str:
        return f"GROUP BY properties.id HAVING avg(property_reviews.rating) >= {predicates.bind(self.threshold)}"

AggregationClause = Union[GroupOnly, GroupWithHaving]

def escape_like(fragment: str) -> str:
    return fragment.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

def parse_search_filter(options: dict | None = None, limit: int | None = None) -> SearchFilter:
    """Validate raw search options, treating blank form values as absent.

    Raises InvalidFilter naming the offending fields.
    """
    data = {k: v for k, v in (options or {}).items() if v is not None and v != ""}
    if limit is not None:
        data["limit"] = limit
    try:
        return SearchFilter.model_validate(data)
    except ValidationError as e:
        fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        raise InvalidFilter(f"Invalid search filter: {e.error_count()} error(s)", fields=[f for f in fields if f]) from e

def build_property_search(
    search_filter: SearchFilter,
    case_insensitive: bool | None = None,
    price_scale: int | None = None,
) -> PropertySearchQuery:
    if case_insensitive is None:
        case_insensitive = settings.CITY_MATCH_CASE_INSENSITIVE
    if price_scale is None:
        price_scale = settings.PRICE_SCALE

    predicates = _Predicates()

    if search_filter.city is not None:
        operator = "ILIKE" if case_insensitive else "LIKE"
        predicates.add(f"city {operator} {predicates.bind(f'%{escape_like(search_filter.city)}%')}")

    if search_filter.owner_id is not None:
        predicates.add(f"owner_id = {predicates.bind(search_filter.owner_id)}")

    # A missing bound leaves that side of the range open
    min_price, max_price = search_filter.min_price, search_filter.max_price
    if min_price is not None and max_price is not None:
        low = predicates.bind(min_price * price_scale)
        high = predicates.bind(max_price * price_scale)
        predicates.add(f"cost_per_night BETWEEN {low}::numeric AND {high}::numeric")
    elif min_price is not None:
        predicates.add(f"cost_per_night >= {predicates.bind(min_price * price_scale)}::numeric")
    elif max_price is not None:
        predicates.add(f"cost_per_night <= {predicates.bind(max_price * price_scale)}::numeric")

    aggregation: AggregationClause
    if search_filter.min_rating is not None:
        aggregation = GroupWithHaving(search_filter.min_rating)
    else:
        aggregation = GroupOnly()

    parts = [BASE_QUERY, predicates.where(), aggregation.render(predicates)]
    parts.append(f"ORDER BY cost_per_night LIMIT {predicates.bind(search_filter.limit)};")
    text = "\n".join(part for part in parts if part)
    return PropertySearchQuery(text=text, parameters=list(predicates.parameters))
