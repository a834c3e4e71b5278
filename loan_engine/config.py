"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class LoanEngineConfig(BaseSettings):
    """Loan amortization engine configuration"""
    
    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stdout
    
    # Currency configuration
    currency: str = "CAD"
    
    # Business rules configuration
    payment_amount_tolerance: str = "0.01"  # Allowed drift between caller and engine amounts
    default_interest_rate: str = "29"       # Annual percent
    default_failed_payment_fee: str = "55"  # Flat fee per failed payment
    brokerage_fee_rate: str = "0.68"        # Share of the loan amount
    
    # Holiday calendar configuration
    holiday_years_ahead: int = 1
    
    class Config:
        env_prefix = "LOAN_ENGINE_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = LoanEngineConfig()


def get_config() -> LoanEngineConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> LoanEngineConfig:
    """Reload configuration from environment"""
    global config
    config = LoanEngineConfig()
    return config
