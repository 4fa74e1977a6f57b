import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Get configuration values from environment
openai_api_key = os.getenv("OPENAI_API_KEY", "")
stage_model = os.getenv("STAGE_MODEL", "gpt-4o-mini")
draft_model = os.getenv("DRAFT_MODEL", "gpt-4-turbo")
debug = os.getenv("DEBUG", "False")
app_title = os.getenv("APP_TITLE", "Case Diary")
app_description = os.getenv("APP_DESCRIPTION", "Case diary, hearing calendar and AI drafting assistant for advocates")
data_dir = os.getenv("DATA_DIR", "data")
storage_key = os.getenv("STORAGE_KEY", "cases")
log_file = os.getenv("LOG_FILE", "app.log")
ocr_min_chars_per_page = int(os.getenv("OCR_MIN_CHARS_PER_PAGE", "150"))
host = os.getenv("HOST", "0.0.0.0")
port = int(os.getenv("PORT", "8000"))

# Configuration dictionary for easy access to all settings
CONFIG = {
    "openai_api_key": openai_api_key,
    "stage_model": stage_model,
    "draft_model": draft_model,
    "debug": debug.lower() == "true",
    "app_title": app_title,
    "app_description": app_description,
    "data_dir": data_dir,
    "storage_key": storage_key,
    "log_file": log_file,
    "ocr_min_chars_per_page": ocr_min_chars_per_page,
    "host": host,
    "port": port,
}
