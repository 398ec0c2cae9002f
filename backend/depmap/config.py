import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()

CLOSURE_MAX_DEPTH = int(os.getenv("CLOSURE_MAX_DEPTH", "2"))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

MAX_SESSIONS = int(os.getenv("MAX_SESSIONS", "50"))
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "25"))

# Optional YAML file replacing the built-in criticality keyword tiers
CRITICALITY_RULES_PATH = os.getenv("CRITICALITY_RULES_PATH") or None
