from dataclasses import dataclass
from typing import Iterator, Union

from structlog import get_logger

from lightbnb.config import settings
from lightbnb.database import DatabaseStore, get_store
from lightbnb.errors import StoreError
from lightbnb.queries.property_search import build_property_search, parse_search_filter
from lightbnb.schemas.property import Property, PropertyCreate, PropertyWithRating
from lightbnb.schemas.search import SearchFilter

logger = get_logger()

@dataclass
class SearchFound:
    """Matching properties, cheapest first. The iterator can be consumed once."""
    properties: Iterator[PropertyWithRating]

@dataclass(frozen=True)
class SearchNoMatches:
    pass

@dataclass(frozen=True)
class SearchStoreUnavailable:
    reason: str

SearchOutcome = Union[SearchFound, SearchNoMatches, SearchStoreUnavailable]

def _iter_properties(rows: list[dict]) -> Iterator[PropertyWithRating]:
    for row in rows:
        yield PropertyWithRating.model_validate(row)

async def get_all_properties(
    options: SearchFilter | dict | None = None,
    limit: int | None = None,
    store: DatabaseStore | None = None,
) -> SearchOutcome:
    """Search properties joined with their average rating.

    ``options`` may be a ready SearchFilter or the raw search form values;
    raw values are validated first and raise InvalidFilter before any query
    runs.
    """
    if isinstance(options, SearchFilter):
        search_filter = options if limit is None else parse_search_filter(options.model_dump(), limit=limit)
    else:
        search_filter = parse_search_filter(options, limit=limit)

    query = build_property_search(search_filter)
    if settings.LOG_QUERIES:
        logger.debug("Property search query", query=query.text, parameters=query.parameters)

    store = store or get_store()
    try:
        rows = await store.execute(query.text, query.parameters)
    except StoreError as e:
        logger.error("Property search failed", error=str(e))
        return SearchStoreUnavailable(reason=str(e))

    logger.info("Searched properties", count=len(rows), limit=search_filter.limit)
    if not rows:
        return SearchNoMatches()
    return SearchFound(properties=_iter_properties(rows))

_ADD_PROPERTY = """INSERT INTO properties (owner_id, title, description, thumbnail_photo_url, cover_photo_url, cost_per_night, street, city, province, post_code, country, parking_spaces, number_of_bathrooms, number_of_bedrooms)
VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13, $14)
RETURNING *;"""

_PROPERTY_COLUMNS = (
    "owner_id", "title", "description", "thumbnail_photo_url", "cover_photo_url", "cost_per_night",
    "street", "city", "province", "post_code", "country", "parking_spaces",
    "number_of_bathrooms", "number_of_bedrooms",
)

async def add_property(property: PropertyCreate | dict, store: DatabaseStore | None = None) -> Property:
    if not isinstance(property, PropertyCreate):
        property = PropertyCreate.model_validate(property)
    values = [getattr(property, column) for column in _PROPERTY_COLUMNS]
    store = store or get_store()
    try:
        rows = await store.execute(_ADD_PROPERTY, values)
    except StoreError as e:
        logger.error("Error adding property", owner_id=property.owner_id, error=str(e))
        raise
    created = Property.model_validate(rows[0])
    logger.info("Added property", property_id=created.id, owner_id=created.owner_id)
    return created
