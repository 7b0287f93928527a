import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./context.db")
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    CACHE_BACKEND = data.get("CACHE_BACKEND", "memory")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # monday.com app credentials
    MONDAY_CLIENT_ID = data.get("MONDAY_CLIENT_ID", "")
    MONDAY_CLIENT_SECRET = data.get("MONDAY_CLIENT_SECRET", "dev-monday-client-secret")
    MONDAY_SIGNING_SECRET = data.get("MONDAY_SIGNING_SECRET", "dev-monday-signing-secret")
    MONDAY_JWT_ISSUER = data.get("MONDAY_JWT_ISSUER")
    MONDAY_JWT_AUDIENCE = data.get("MONDAY_JWT_AUDIENCE")
    MONDAY_API_URL = data.get("MONDAY_API_URL", "https://api.monday.com/v2")
    MONDAY_API_REGION = data.get("MONDAY_API_REGION")
    MONDAY_API_TIMEOUT_SECONDS = float(data.get("MONDAY_API_TIMEOUT_SECONDS", 10))
    MONDAY_OAUTH_AUTHORIZE_URL = data.get(
        "MONDAY_OAUTH_AUTHORIZE_URL", "https://auth.monday.com/oauth2/authorize"
    )
    MONDAY_OAUTH_TOKEN_URL = data.get(
        "MONDAY_OAUTH_TOKEN_URL", "https://auth.monday.com/oauth2/token"
    )
    MONDAY_OAUTH_REDIRECT_URI = data.get("MONDAY_OAUTH_REDIRECT_URI", "")
    MONDAY_PLAN_SKUS = data.get("MONDAY_PLAN_SKUS", {})

    # Secrets
    TOKEN_ENCRYPTION_KEY = data.get("TOKEN_ENCRYPTION_KEY", "")
    OAUTH_STATE_SECRET = data.get("OAUTH_STATE_SECRET", "dev-oauth-state-secret")
    OAUTH_STATE_TTL_SECONDS = int(data.get("OAUTH_STATE_TTL_SECONDS", 600))
    CRON_SECRET = data.get("CRON_SECRET", "")

    # Object storage (Supabase storage REST API)
    STORAGE_URL = data.get("STORAGE_URL", "http://localhost:54321/storage/v1")
    STORAGE_SERVICE_KEY = data.get("STORAGE_SERVICE_KEY", "")
    STORAGE_BUCKET = data.get("STORAGE_BUCKET", "context-files")
    STORAGE_TIMEOUT_SECONDS = float(data.get("STORAGE_TIMEOUT_SECONDS", 15))
