"""
Configuration management for the Legal Office backend.

This module provides configuration management with proper environment
variable handling and validation. Every section reads from the process
environment (and a local ``.env`` file when present).
"""

import logging
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "أنت مساعد قانوني ذكي يقدم استشارات قانونية دقيقة ومهنية. "
    "تتحدث باللغة العربية وتفهم القوانين المصرية جيداً."
)


class DatabaseConfig(BaseSettings):
    """Database configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    database_url: str = Field(default="sqlite:///./legal_ai.db", alias="DATABASE_URL")

    # Connection pool settings (ignored for SQLite)
    db_pool_size: int = Field(default=10, alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, alias="DB_MAX_OVERFLOW")
    db_pool_timeout: int = Field(default=30, alias="DB_POOL_TIMEOUT")
    db_echo: bool = Field(default=False, alias="DB_ECHO")

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v):
        """Validate database URL scheme."""
        if "://" not in v:
            raise ValueError('DATABASE_URL must be a SQLAlchemy URL, e.g. sqlite:///./legal_ai.db')
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


class SecurityConfig(BaseSettings):
    """Security configuration with validation."""

    model_config = SettingsConfigDict(extra="ignore")

    # JWT settings
    secret_key: str = Field(..., alias="SECRET_KEY")
    algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60 * 24, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Encryption of provider API keys stored in the database
    encryption_key: Optional[str] = Field(default=None, alias="ENCRYPTION_KEY")

    # Password settings
    min_password_length: int = Field(default=6, alias="MIN_PASSWORD_LENGTH")
    max_password_length: int = Field(default=128, alias="MAX_PASSWORD_LENGTH")

    @field_validator('secret_key')
    @classmethod
    def validate_secret_key(cls, v):
        """Validate secret key strength."""
        if v == 'your-secret-key' or len(v) < 32:
            raise ValueError('Secret key must be at least 32 characters and not be the default')
        return v

    @field_validator('access_token_expire_minutes')
    @classmethod
    def validate_token_expiry(cls, v):
        if v <= 0:
            raise ValueError('Token expiry must be positive')
        return v


class ApplicationConfig(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    # Application settings
    app_name: str = Field(default="Legal Office", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    app_description: str = Field(
        default="Law-firm practice management and legal assistant API",
        alias="APP_DESCRIPTION",
    )
    environment: str = Field(default="development", alias="ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # API settings
    api_root_path: str = Field(default="/api", alias="API_ROOT_PATH")
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=3001, alias="API_PORT")
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")

    # Lawyers may sign themselves up when enabled
    allow_open_registration: bool = Field(default=True, alias="ALLOW_OPEN_REGISTRATION")

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        valid_envs = ['development', 'staging', 'production', 'test']
        if v not in valid_envs:
            raise ValueError(f'Environment must be one of: {valid_envs}')
        return v

    @field_validator('api_port')
    @classmethod
    def validate_api_port(cls, v):
        """Validate API port."""
        if not 1 <= v <= 65535:
            raise ValueError('API port must be between 1 and 65535')
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class AIConfig(BaseSettings):
    """Defaults for the legal assistant. Admins can override most of them at runtime."""

    model_config = SettingsConfigDict(extra="ignore")

    # GLM-4 compatible chat-completions endpoint
    glm_api_url: str = Field(
        default="https://open.bigmodel.cn/api/paas/v4/chat/completions",
        alias="GLM_API_URL",
    )
    glm_api_key: str = Field(default="", alias="GLM_API_KEY")
    glm_model: str = Field(default="glm-4-0520", alias="GLM_MODEL")

    # Gemini
    gemini_api_key: str = Field(default="", alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-2.5-flash", alias="GEMINI_MODEL")

    # Request behaviour
    timeout_seconds: float = Field(default=60.0, alias="AI_TIMEOUT_SECONDS")
    max_retries: int = Field(default=3, alias="AI_MAX_RETRIES")
    retry_delay: float = Field(default=1.0, alias="AI_RETRY_DELAY")

    # Generation settings
    temperature: float = Field(default=0.7, alias="AI_TEMPERATURE")
    top_p: float = Field(default=0.7, alias="AI_TOP_P")
    max_tokens: int = Field(default=2048, alias="AI_MAX_TOKENS")
    max_history: int = Field(default=10, alias="AI_MAX_HISTORY")
    system_prompt: str = Field(default=DEFAULT_SYSTEM_PROMPT, alias="AI_SYSTEM_PROMPT")
    default_mode: str = Field(default="glm4", alias="AI_MODE")

    @field_validator('max_retries')
    @classmethod
    def validate_max_retries(cls, v):
        if not 0 <= v <= 10:
            raise ValueError('AI_MAX_RETRIES must be between 0 and 10')
        return v

    @field_validator('default_mode')
    @classmethod
    def validate_mode(cls, v):
        if v not in ("glm4", "gemini", "predefined"):
            raise ValueError('AI_MODE must be one of: glm4, gemini, predefined')
        return v


class Config:
    """Main configuration class that combines all config sections."""

    def __init__(self):
        """Initialize configuration with validation."""
        try:
            self.database = DatabaseConfig()
            self.security = SecurityConfig()
            self.application = ApplicationConfig()
            self.ai = AIConfig()

            logger.info("Configuration loaded successfully")

        except Exception as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

    def get_database_url(self) -> str:
        """Get database URL."""
        return self.database.database_url

    def is_production(self) -> bool:
        """Check if running in production."""
        return self.application.environment == 'production'

    def is_development(self) -> bool:
        """Check if running in development."""
        return self.application.environment == 'development'

    def is_test(self) -> bool:
        return self.application.environment == 'test'


# Global configuration instance
config = Config()


def get_config() -> Config:
    """Get the global configuration instance."""
    return config
