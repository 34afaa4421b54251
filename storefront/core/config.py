from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STORE_", env_file=".env", extra="ignore")

    data_dir: str = Field(default="data", description="Directory holding one JSON file per entity kind")
    products_file: str = Field(default="products.json", description="Product collection file name")
    carts_file: str = Field(default="carts.json", description="Cart collection file name")

    enforce_unique_code: bool = Field(default=False, description="Reject products whose code is already taken")
    reload_on_read: bool = Field(default=False, description="Re-read the file before listing (file is source of truth)")

    log_level: str = Field(default="INFO")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8080)

settings = Settings()
