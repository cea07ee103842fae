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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./seatkeeper.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")

    # Magic links and invitation email
    APP_BASE_URL = data.get("APP_BASE_URL", "http://localhost:8080")
    PRODUCT_NAME = data.get("PRODUCT_NAME", "ONEGO Learning")
    EMAIL_API_URL = data.get("EMAIL_API_URL", "https://api.resend.com/emails")
    RESEND_API_KEY = data.get("RESEND_API_KEY", "")
    EMAIL_FROM = data.get("EMAIL_FROM", "ONEGO Learning <noreply@updates.onego.ai>")
    EMAIL_TIMEOUT_SECONDS = data.get("EMAIL_TIMEOUT_SECONDS", 10.0)

    # Reconciliation and sweeps
    ENABLE_SCHEDULER = bool(data.get("ENABLE_SCHEDULER", True))
    INVITATION_SYNC_INTERVAL_SECONDS = data.get("INVITATION_SYNC_INTERVAL_SECONDS", 120)
    DATA_REFRESH_INTERVAL_SECONDS = data.get("DATA_REFRESH_INTERVAL_SECONDS", 30)
    EXPIRY_SWEEP_INTERVAL_MINUTES = data.get("EXPIRY_SWEEP_INTERVAL_MINUTES", 60)
