from datetime import date
from lightbnb.schemas.property import PropertyWithRating

class ReservationWithProperty(PropertyWithRating):
    """A guest's reservation flattened together with the reserved property."""
    reservation_id: int
    guest_id: int
    start_date: date
    end_date: date
