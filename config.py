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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./studio.db")
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", True))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 3000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", ["*"])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Authentication
    JWT_SECRET = data.get("JWT_SECRET", os.environ.get("JWT_SECRET", "change-me"))
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    JWT_EXPIRATION_HOURS = data.get("JWT_EXPIRATION_HOURS", 24)
    # Login is rejected for unverified users only when this is on
    REQUIRE_EMAIL_VERIFICATION = bool(data.get("REQUIRE_EMAIL_VERIFICATION", False))

    # Generation API (Gemini / Veo)
    GEMINI_API_KEY = data.get("GEMINI_API_KEY", os.environ.get("GEMINI_API_KEY", ""))
    GEMINI_API_BASE = data.get("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta")
    GEMINI_IMAGE_MODEL = data.get("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image-preview")
    GEMINI_VIDEO_MODEL = data.get("GEMINI_VIDEO_MODEL", "veo-2.0-generate-001")
    GENERATION_TIMEOUT_SECONDS = data.get("GENERATION_TIMEOUT_SECONDS", 120.0)
    VIDEO_POLL_INTERVAL_SECONDS = data.get("VIDEO_POLL_INTERVAL_SECONDS", 10.0)
    VIDEO_MAX_POLLS = data.get("VIDEO_MAX_POLLS", 60)

    # Payments
    PAYMENT_GATEWAY_URL = data.get("PAYMENT_GATEWAY_URL", "https://payment-gateway.example.com/pay")
    PAYMENT_CALLBACK_SECRET = data.get("PAYMENT_CALLBACK_SECRET", None)
    ENABLE_PAYMENT_SIMULATION = bool(data.get("ENABLE_PAYMENT_SIMULATION", True))

    # Ledger Reconciliation Configuration
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily
