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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./reset.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", True))
    ALLOWED_ORIGIN = data.get("ALLOWED_ORIGIN", "https://www.onlinetherapytools.com")
    SERVICE_NAME = data.get("SERVICE_NAME", "Online Therapy Tools")
    FRONTEND_DOMAIN = data.get("FRONTEND_DOMAIN", "https://www.onlinetherapytools.com")
    RESET_TOKEN_TTL_MINUTES = int(data.get("RESET_TOKEN_TTL_MINUTES", 15))
    RESET_MAX_ACTIVE_TOKENS = int(data.get("RESET_MAX_ACTIVE_TOKENS", 2))
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 10))
    EMAIL_BACKEND = data.get("EMAIL_BACKEND", "log")
    SENDER_EMAIL = data.get("SENDER_EMAIL", "no-reply@onlinetherapytools.com")
    SMTP_HOST = data.get("SMTP_HOST", "localhost")
    SMTP_PORT = int(data.get("SMTP_PORT", 587))
    SMTP_USERNAME = data.get("SMTP_USERNAME", "")
    SMTP_PASSWORD = data.get("SMTP_PASSWORD", "")
    SMTP_USE_TLS = bool(data.get("SMTP_USE_TLS", True))
    SMTP_TIMEOUT_SECONDS = float(data.get("SMTP_TIMEOUT_SECONDS", 10))
