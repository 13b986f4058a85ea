"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class FinancialServiceConfig(BaseSettings):
    """Financial service configuration"""
    
    # Database configuration
    database_url: str = "sqlite:///financial_service.db"  # memory://, sqlite:///path, postgresql://...
    
    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8090
    upload_directory: str = "./uploads"
    
    # Security configuration
    auth_enabled: bool = True
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_audience: Optional[str] = None
    jwt_issuer: Optional[str] = None
    
    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    
    # Business rules configuration
    include_received_in_balance: bool = True
    
    class Config:
        env_prefix = "FINSVC_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = FinancialServiceConfig()


def get_config() -> FinancialServiceConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> FinancialServiceConfig:
    """Reload configuration from environment"""
    global config
    config = FinancialServiceConfig()
    return config
