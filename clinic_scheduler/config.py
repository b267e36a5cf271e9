"""Configuration for the clinic scheduling engine.

All tunables centralized here - modify as needed without touching code.
Opening hours are NOT configured here: see schedule_rules.py.
"""
import os

from dotenv import load_dotenv

load_dotenv()

# Storage
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///clinic_appointments.db")
STORE_TIMEOUT_SECONDS = float(os.getenv("STORE_TIMEOUT_SECONDS", "10"))

# Retry policy for transient store failures (1 initial attempt + retries)
STORE_MAX_RETRIES = int(os.getenv("STORE_MAX_RETRIES", "3"))
STORE_RETRY_MIN_SECONDS = float(os.getenv("STORE_RETRY_MIN_SECONDS", "0.5"))
STORE_RETRY_MAX_SECONDS = float(os.getenv("STORE_RETRY_MAX_SECONDS", "4"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Booking rules
SLOT_MINUTES = 30
MIN_REASON_LENGTH = 10
MAX_REASON_LENGTH = 1000
MAX_PATIENT_NAME_LENGTH = 100
BOOKING_HORIZON_DAYS = 90  # ~3 months ahead

# API
API_PORT = int(os.getenv("API_PORT", "8000"))
