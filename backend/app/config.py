"""
Configuration - env vars, constants, API key setup.
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv
import google.generativeai as genai

ROOT_DIR = Path(__file__).parent.parent
load_dotenv(ROOT_DIR / '.env')

# Logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("homeworkhelper")

# Database
MONGO_URL = os.environ.get("MONGO_URL", "mongodb://localhost:27017")
DB_NAME = os.environ.get("DB_NAME", "homeworkhelper")

# Every store call shares this budget; past it the read endpoints serve mock data
QUERY_TIMEOUT_SECONDS = 5

# Questions
VALID_SUBJECTS = ["Math", "Science", "English", "History", "Other"]
ANSWER_WORD_LIMIT = 200
MAX_QUESTION_LENGTH = 2000
MAX_TOPIC_LENGTH = 100

# Analytics
DATE_RANGES = ["7days", "30days", "all", "custom"]
DEFAULT_TOP_LIMIT = 5
SEARCH_TOP_LIMIT = 20

# History pagination
DEFAULT_PAGE_LIMIT = 50
MAX_PAGE_LIMIT = 100

# Firebase
FIREBASE_CREDENTIALS_PATH = os.environ.get("FIREBASE_CREDENTIALS_PATH", "firebase-service-account.json")
if not Path(FIREBASE_CREDENTIALS_PATH).is_absolute():
    FIREBASE_CREDENTIALS_PATH = str(ROOT_DIR / FIREBASE_CREDENTIALS_PATH)
AUTH_DISABLED = os.environ.get("AUTH_DISABLED", "false").lower() in ("1", "true", "yes")

# LLM API Key
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY")
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")

if not GEMINI_API_KEY:
    logger.warning("⚠️ No GEMINI_API_KEY found - question answering will fail")
else:
    genai.configure(api_key=GEMINI_API_KEY)


def get_llm_api_key():
    """Get the LLM API key from environment variables."""
    return GEMINI_API_KEY


def get_version_info():
    """Get deployment version information."""
    git_commit = os.environ.get("GIT_COMMIT_SHA")
    if not git_commit:
        try:
            if os.path.exists(".git_commit"):
                with open(".git_commit", "r") as f:
                    git_commit = f.read().strip()
        except OSError:
            pass

    if not git_commit:
        logger.warning("GIT_COMMIT_SHA not set and .git_commit not found. Build pipeline issue?")
        git_commit = "unknown"

    build_time = os.environ.get("BUILD_TIME", "unknown")
    env = os.environ.get("ENV", os.environ.get("ENVIRONMENT", "development"))

    return {
        "git_commit": git_commit,
        "build_time": build_time,
        "environment": env
    }
