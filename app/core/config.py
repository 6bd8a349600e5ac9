# Defines application-wide settings using pydantic-settings' BaseSettings
# Manages environment variables for various aspects of the application:
# API configuration (prefix, project name)
# Storage of the posts document
# Upload limits and object storage credentials
# Application-specific settings (CORS, debug mode)


import json
from typing import Annotated, List, Optional, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # API configuration
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Flatfile Blog API"
    VERSION: str = "0.1.0"

    # Posts document. POSTS_FILE wins when set, otherwise the newest of the candidates is used
    POSTS_FILE: Optional[str] = None
    POSTS_FILE_CANDIDATES: Annotated[List[str], NoDecode] = ["posts.json", "data/posts.json"]

    # Route reads through the write queue for strict read-after-write
    SERIALIZE_READS: bool = False

    # File uploads
    UPLOAD_DIRECTORY: str = "public/uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024  # 5 MB
    MAX_BODY_SIZE: int = 10 * 1024 * 1024  # 10 MB

    # Static client files served at the root, skipped when the directory is missing
    STATIC_DIRECTORY: str = "public"

    # Cloudflare R2 Storage
    R2_ENDPOINT: str = ""
    R2_ACCESS_KEY_ID: str = ""
    R2_SECRET_ACCESS_KEY: str = ""
    R2_BUCKET_NAME: str = "blog-media"
    R2_PUBLIC_URL: str = ""

    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = [
        "http://localhost:3000",     # Local development
        "http://localhost:8000",
        "*",
    ]

    # Development settings - set these differently in production
    DEBUG: bool = False
    ENVIRONMENT: str = "production"

    @field_validator("BACKEND_CORS_ORIGINS", "POSTS_FILE_CANDIDATES", mode="before")
    @classmethod
    def assemble_list(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, str):
            # Handle JSON string format
            try:
                return json.loads(v)
            except ValueError:
                return []
        return v

    @property
    def r2_configured(self) -> bool:
        # Uploaded objects are linked through the public bucket URL, so it is required too
        return all([self.R2_ENDPOINT, self.R2_ACCESS_KEY_ID, self.R2_SECRET_ACCESS_KEY, self.R2_PUBLIC_URL])

# Create settings instance
settings = Settings()
