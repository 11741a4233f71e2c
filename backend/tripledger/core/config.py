"""
Application configuration and environment settings.
"""
from pydantic_settings import BaseSettings
from pydantic import field_validator
from decimal import Decimal
from typing import List, Union


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # Application
    APP_NAME: str = "Tripledger"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    
    # Money
    BASE_CURRENCY: str = "BRL"  # Currency every balance and suggestion is expressed in
    SETTLEMENT_EPSILON: Decimal = Decimal("0.01")  # Balances within one cent count as settled
    
    # CORS
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000"]
    
    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v
    
    @field_validator("BASE_CURRENCY")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()
    
    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
