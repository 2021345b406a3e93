"""Application configuration and constants."""
import os
from pathlib import Path

# Directory paths
BASE_DIR = Path(__file__).resolve().parent.parent

# Database location (override with PHOTOSHELF_DATABASE_PATH, e.g. for tests)
DATABASE_PATH = Path(os.environ.get("PHOTOSHELF_DATABASE_PATH", str(BASE_DIR / "photoshelf.db")))

# JWT configuration
# HS512 needs a 64+ byte secret; set PHOTOSHELF_JWT_SECRET in production
JWT_SECRET = os.environ.get(
    "PHOTOSHELF_JWT_SECRET",
    "photoshelf-development-secret-change-me-photoshelf-development-secret-change-me",
)
JWT_ALGORITHM = "HS512"
JWT_EXPIRATION_MS = int(os.environ.get("PHOTOSHELF_JWT_EXPIRATION_MS", str(24 * 60 * 60 * 1000)))  # 1 day

# Upload limits
MAX_PHOTO_SIZE = int(os.environ.get("PHOTOSHELF_MAX_PHOTO_SIZE", str(8 * 1024 * 1024)))  # 8 MiB
IMAGE_CONTENT_TYPE_PREFIX = "image/"

# Pagination
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
PREVIEW_PHOTO_COUNT = 4

# Paths that don't require authentication
PUBLIC_PATHS = {
    "/api/auth/signup", "/api/auth/signin",
    "/health", "/api/health",
    "/docs", "/redoc", "/openapi.json",
}

# Logging
LOG_LEVEL = os.environ.get("PHOTOSHELF_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
