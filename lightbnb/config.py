from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL

class Settings(BaseSettings):
    DATABASE_URL: str | None = None
    DB_USER: str | None = None
    DB_PASSWORD: str | None = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "lightbnb"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: float = 30.0
    # Seconds before asyncpg cancels a running statement
    DB_COMMAND_TIMEOUT: float = 30.0
    DEFAULT_SEARCH_LIMIT: int = 10
    CITY_MATCH_CASE_INSENSITIVE: bool = False
    # Multiplier applied to price bounds, e.g. 100 when cost_per_night is stored in cents
    PRICE_SCALE: int = 1
    LOG_QUERIES: bool = False

    class Config:
        env_file = ".env"

    @property
    def database_url(self) -> str | URL:
        """DATABASE_URL when set, otherwise an asyncpg URL built from the DB_* parts."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return URL.create(
            "postgresql+asyncpg",
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )

settings = Settings()
