# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration — all env-driven, read once at process start.
Single source of truth for every tunable parameter.
"""

import os


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "congregation-service")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8000"))

    # Congregation requests are approved on intake (development deployments).
    AUTO_APPROVE_REQUESTS: bool = _flag("AUTO_APPROVE_REQUESTS")

    # Directory / content upstreams
    DIRECTORY_COUNTRY_API: str = os.getenv("DIRECTORY_COUNTRY_API", "")
    DIRECTORY_CONGREGATION_API: str = os.getenv("DIRECTORY_CONGREGATION_API", "")
    SOURCE_MATERIAL_CDN: str = os.getenv("SOURCE_MATERIAL_CDN", "")
    DIRECTORY_LANGUAGES: tuple[str, ...] = tuple(
        lang.strip().upper()
        for lang in os.getenv("DIRECTORY_LANGUAGES", "E,MG").split(",")
        if lang.strip()
    )
    # 0 disables the timeout
    UPSTREAM_TIMEOUT: float = float(os.getenv("UPSTREAM_TIMEOUT", "0"))
    MAX_ISSUE_LOOKAHEAD: int = int(os.getenv("MAX_ISSUE_LOOKAHEAD", "12"))
    MAX_PARALLEL_ISSUES: int = int(os.getenv("MAX_PARALLEL_ISSUES", "4"))

    # Email delivery through the notification service
    NOTIFICATION_SERVICE_URL: str = os.getenv("NOTIFICATION_SERVICE_URL", "")
    NOTIFICATION_TIMEOUT: float = float(os.getenv("NOTIFICATION_TIMEOUT", "3.0"))
    REVIEWER_EMAIL: str = os.getenv("REVIEWER_EMAIL", "")

    # Fernet key for pocket one-time codes
    ENCRYPTION_KEY: str = os.getenv("ENCRYPTION_KEY", "")

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def missing_upstreams(self) -> list[str]:
        """Names of upstream URL settings that are not configured."""
        names = (
            "DIRECTORY_COUNTRY_API",
            "DIRECTORY_CONGREGATION_API",
            "SOURCE_MATERIAL_CDN",
        )
        return [name for name in names if not getattr(self, name)]


settings = Settings()
