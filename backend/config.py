"""
Configuration module for the invoice analytics backend.

Loads environment variables and validates required settings.
"""
import os
from typing import List
from dotenv import load_dotenv

# Load .env file
load_dotenv()

# Development-only signing key; production must set its own
DEFAULT_SESSION_SECRET = "invoice-automation-secret"


class Settings:
    """Application settings loaded from environment variables."""

    # Supabase Configuration
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    # Server-side key: invoices are shared across users, row-level security is not used here
    SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")
    INVOICES_TABLE: str = os.getenv("INVOICES_TABLE", "invoices")
    GOOGLE_USERS_TABLE: str = os.getenv("GOOGLE_USERS_TABLE", "google_users")

    # Google Gemini API
    GOOGLE_API_KEY: str = os.getenv("GOOGLE_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

    # Google OAuth
    GOOGLE_CLIENT_ID: str = os.getenv("GOOGLE_CLIENT_ID", "")
    GOOGLE_CLIENT_SECRET: str = os.getenv("GOOGLE_CLIENT_SECRET", "")
    GOOGLE_CALLBACK_URL: str = os.getenv(
        "GOOGLE_CALLBACK_URL",
        "http://localhost:8000/api/auth/google/callback"
    )

    # Session cookie
    SESSION_SECRET: str = os.getenv("SESSION_SECRET", DEFAULT_SESSION_SECRET)
    SESSION_MAX_AGE: int = int(os.getenv("SESSION_MAX_AGE", str(60 * 60 * 24 * 7)))

    # Application Settings
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS Settings
    CORS_ALLOWED_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ALLOWED_ORIGINS", "").split(",")
        if origin.strip()
    ]

    @property
    def oauth_configured(self) -> bool:
        """Whether Google OAuth credentials are present."""
        return bool(self.GOOGLE_CLIENT_ID and self.GOOGLE_CLIENT_SECRET)

    @classmethod
    def validate(cls) -> None:
        """
        Validate that all required settings are configured.

        In production the session cookie signing key must also be set to
        something other than the built-in development default.

        Raises:
            ValueError: If any required setting is missing.
        """
        required_settings = {
            "SUPABASE_URL": cls.SUPABASE_URL,
            "SUPABASE_KEY": cls.SUPABASE_KEY,
        }

        missing = [key for key, value in required_settings.items() if not value]

        if cls.is_production() and cls.SESSION_SECRET in ("", DEFAULT_SESSION_SECRET):
            missing.append("SESSION_SECRET")

        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Please check your .env file."
            )

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production environment."""
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def is_development(cls) -> bool:
        """Check if running in development environment."""
        return cls.ENVIRONMENT.lower() == "development"


# Create a singleton instance
settings = Settings()

# Validate settings on module import (will fail fast if misconfigured)
# Skip validation during tests or when importing for introspection
if os.getenv("VALIDATE_CONFIG", "true").lower() == "true":
    try:
        settings.validate()
    except ValueError as e:
        # In development, warn but don't crash
        if settings.is_development():
            print(f"Warning: {e}")
            print("   The app may not work correctly until you configure your .env file.")
        else:
            raise
