from structlog import get_logger

from lightbnb.database import DatabaseStore, get_store
from lightbnb.errors import StoreError
from lightbnb.schemas.user import User, UserCreate

logger = get_logger()

async def _fetch_one(query: str, parameters: list, store: DatabaseStore | None) -> dict | None:
    rows = await (store or get_store()).execute(query, parameters)
    return rows[0] if rows else None

async def get_user_with_email(email: str, store: DatabaseStore | None = None) -> User | None:
    try:
        row = await _fetch_one("SELECT * FROM users WHERE email = $1;", [email], store)
    except StoreError as e:
        logger.error("Error fetching user by email", error=str(e))
        raise
    return User.model_validate(row) if row else None

async def get_user_with_id(user_id: int, store: DatabaseStore | None = None) -> User | None:
    try:
        row = await _fetch_one("SELECT * FROM users WHERE id = $1;", [user_id], store)
    except StoreError as e:
        logger.error("Error fetching user by id", user_id=user_id, error=str(e))
        raise
    return User.model_validate(row) if row else None

async def add_user(user: UserCreate | dict, store: DatabaseStore | None = None) -> User:
    if not isinstance(user, UserCreate):
        user = UserCreate.model_validate(user)
    try:
        row = await _fetch_one(
            "INSERT INTO users (name, email, password) VALUES ($1, $2, $3) RETURNING *;",
            [user.name, user.email, user.password],
            store,
        )
    except StoreError as e:
        logger.error("Error adding user", error=str(e))
        raise
    created = User.model_validate(row)
    logger.info("Added user", user_id=created.id)
    return created
