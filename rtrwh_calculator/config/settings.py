import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env variables
load_dotenv()

# --- Path Resolution ---
# Base = rtrwh_calculator/
BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"

# --- Static Reference Tables ---
CITIES_FILE = Path(os.getenv("CITIES_FILE", str(DATA_DIR / "cities.json")))
COEFFICIENTS_FILE = Path(os.getenv("COEFFICIENTS_FILE", str(DATA_DIR / "coefficients.json")))

# --- Submission Storage ---
# 'memory' keeps submissions for the life of the process, 'mongo' persists them
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory").lower()
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "rtrwh_calculator")

# --- API / Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8300"))
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",")]
