from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    mongo_url: str = "mongodb://mongo:27017"
    mongo_database: str = "mydb"
    mongo_collection: str = "movies"
    mongo_timeout_ms: int = 5000
    mongo_max_pool_size: int = 100
    strict_query_params: bool = False
    log_level: str = "INFO"

    model_config = {"env_prefix": "MOVIES_API_"}


settings = Settings()
