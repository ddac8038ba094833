"""
Runtime settings for the content signatures service.

Every value can be overridden through an environment variable of the same name.
"""

import os

# Database
DB_USER = os.getenv("DB_USER", "postgres")
DB_PASSWORD = os.getenv("DB_PASSWORD", "root")
DB_HOST = os.getenv("DB_HOST", "db")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME", "signatures-db")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)

# Host context tokens (issued and signed by the host platform)
CONTEXT_TOKEN_SECRET = os.getenv("CONTEXT_TOKEN_SECRET", "change-me")
CONTEXT_TOKEN_ALGORITHM = os.getenv("CONTEXT_TOKEN_ALGORITHM", "HS256")
CONTEXT_TOKEN_EXPIRE_MINUTES = int(os.getenv("CONTEXT_TOKEN_EXPIRE_MINUTES", "15"))

# Host platform REST API (groups, page restrictions)
HOST_API_BASE_URL = os.getenv("HOST_API_BASE_URL", "http://localhost:8080/api")
HOST_API_TOKEN = os.getenv("HOST_API_TOKEN", "")
HOST_API_TIMEOUT_SECONDS = float(os.getenv("HOST_API_TIMEOUT_SECONDS", "10"))

# Members of this group may use the admin endpoints
ADMIN_GROUP_ID = os.getenv("ADMIN_GROUP_ID", "site-administrators")

# Retention of contracts belonging to trashed pages
RETENTION_DAYS = int(os.getenv("RETENTION_DAYS", "90"))
CLEANUP_JOB_ENABLED = os.getenv("CLEANUP_JOB_ENABLED", "true").lower() in ("1", "true", "yes")

# Outgoing webhooks
WEBHOOK_TIMEOUT_SECONDS = float(os.getenv("WEBHOOK_TIMEOUT_SECONDS", "10"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
