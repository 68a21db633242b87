import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    PLATFORM_DB_URI = data.get("PLATFORM_DB_URI", "sqlite+aiosqlite:///./platform.db")
    # One database per store; {tenant_id} is substituted at provisioning time
    STORE_DB_URI_TEMPLATE = data.get(
        "STORE_DB_URI_TEMPLATE", "sqlite+aiosqlite:///./stores/store_{tenant_id}.db"
    )
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    ACCESS_TOKEN_MINUTES = int(data.get("ACCESS_TOKEN_MINUTES", 60))
    IMPERSONATION_TOKEN_MINUTES = int(data.get("IMPERSONATION_TOKEN_MINUTES", 30))
    PAYMENT_TOLERANCE = data.get("PAYMENT_TOLERANCE", "0.01")
