from structlog import get_logger

from lightbnb.config import settings
from lightbnb.database import DatabaseStore, get_store
from lightbnb.errors import StoreError
from lightbnb.schemas.reservation import ReservationWithProperty

logger = get_logger()

# Upcoming reservations only: end_date still in the future
_GUEST_RESERVATIONS = """SELECT reservations.id AS reservation_id, reservations.guest_id, reservations.start_date, reservations.end_date,
  properties.*, avg(property_reviews.rating) AS average_rating
FROM reservations
JOIN properties ON reservations.property_id = properties.id
JOIN property_reviews ON properties.id = property_reviews.property_id
WHERE reservations.guest_id = $1 AND reservations.end_date > now()::date
GROUP BY reservations.id, properties.id
ORDER BY reservations.start_date
LIMIT $2;"""

async def get_all_reservations(
    guest_id: int, limit: int | None = None, store: DatabaseStore | None = None
) -> list[ReservationWithProperty]:
    if limit is None:
        limit = settings.DEFAULT_SEARCH_LIMIT
    if limit <= 0:
        raise ValueError("limit must be positive")
    try:
        rows = await (store or get_store()).execute(_GUEST_RESERVATIONS, [guest_id, limit])
    except StoreError as e:
        logger.error("Error fetching reservations", guest_id=guest_id, error=str(e))
        raise
    logger.info("Fetched reservations", guest_id=guest_id, count=len(rows))
    return [ReservationWithProperty.model_validate(row) for row in rows]
