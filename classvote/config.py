# classvote/config.py
# Process configuration, read from the environment (and .env when present)
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

MB = 1024 * 1024

# Upload limit for option images
MAX_UPLOAD_MB = 5


class Settings(BaseModel):
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "classvote"
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False

    upload_dir: Path = Path("uploads")
    public_dir: Path = Path("public")
    uploads_url_prefix: str = "/uploads"
    max_upload_bytes: int = MAX_UPLOAD_MB * MB

    cors_origins: List[str] = ["*"]

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
            mongo_db=os.getenv("MONGO_DB", "classvote"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            debug=os.getenv("DEBUG", "false").lower() in ("1", "true", "yes"),
            upload_dir=Path(os.getenv("UPLOAD_DIR", "uploads")),
            public_dir=Path(os.getenv("PUBLIC_DIR", "public")),
            max_upload_bytes=int(float(os.getenv("MAX_UPLOAD_MB", str(MAX_UPLOAD_MB))) * MB),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )


def ensure_directories(settings: Settings) -> None:
    """Create the upload and public directories if they are missing."""
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    settings.public_dir.mkdir(parents=True, exist_ok=True)
