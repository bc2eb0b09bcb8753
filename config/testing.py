import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_engine_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

ORG_UTC_OFFSET_MINUTES = 330
BATCH_MAX_WORKERS = 4

NOTIFY_TIMEOUT_SECONDS = 1.0
WHATSAPP_API_URL = "https://graph.facebook.com/v17.0"
WHATSAPP_API_TOKEN = None
WHATSAPP_PHONE_NUMBER_ID = None
WHATSAPP_RECIPIENT = None
