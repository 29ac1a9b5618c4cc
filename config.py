"""
Bundlediff - Manifest Header Comparison
"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application Info
    APP_NAME: str = "Bundlediff"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "WARNING"  # DEBUG=true forces DEBUG

    # Descriptor resolution
    MANIFEST_NAME: str = "META-INF/MANIFEST.MF"  # Relative to a directory or archive root
    ARCHIVE_SUFFIXES: list[str] = [".jar"]
    URL_SCHEMES: list[str] = ["http", "https"]
    HTTP_TIMEOUT: float = 30.0  # seconds

    # Comparison
    # Comma-separated header names always left out of reports
    # Example: "Bnd-LastModified,Created-By"
    IGNORED_HEADERS: str = ""

    @property
    def ignored_headers(self) -> set[str]:
        return {h.strip() for h in self.IGNORED_HEADERS.split(",") if h.strip()}

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.DEBUG else self.LOG_LEVEL.upper()

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
