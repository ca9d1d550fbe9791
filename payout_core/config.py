"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from decimal import Decimal
from pydantic_settings import BaseSettings
from typing import Optional


class PayoutConfig(BaseSettings):
    """Payout validation core configuration"""
    
    # Business rules configuration
    max_payout_amount: str = "1000000"  # Major units, decimal as string
    
    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stderr
    
    @property
    def max_payout_decimal(self) -> Decimal:
        """Maximum payout amount as a Decimal"""
        return Decimal(self.max_payout_amount)
    
    class Config:
        env_prefix = "PAYOUT_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = PayoutConfig()


def get_config() -> PayoutConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> PayoutConfig:
    """Reload configuration from environment"""
    global config
    config = PayoutConfig()
    return config
