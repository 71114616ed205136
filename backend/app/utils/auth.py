"""Firebase Admin setup and ID token verification."""

import os
from typing import Optional

import firebase_admin
from firebase_admin import auth as firebase_auth, credentials
from firebase_admin.exceptions import FirebaseError

from app.config import logger, FIREBASE_CREDENTIALS_PATH


def init_firebase() -> bool:
    """Initialize the default Firebase app once. Returns False when no credentials are available."""
    try:
        firebase_admin.get_app()
        return True
    except ValueError:
        pass

    if not os.path.exists(FIREBASE_CREDENTIALS_PATH):
        logger.warning(f"⚠️ Firebase credentials not found at {FIREBASE_CREDENTIALS_PATH} - bearer tokens will be rejected")
        return False

    firebase_admin.initialize_app(credentials.Certificate(FIREBASE_CREDENTIALS_PATH))
    logger.info("✅ Firebase Admin initialized")
    return True


def decode_token(token: str) -> Optional[dict]:
    """Verify a Firebase ID token and return its claims, or None if it is not valid"""
    try:
        return firebase_auth.verify_id_token(token)
    except (ValueError, FirebaseError) as e:
        # ValueError covers malformed tokens and an uninitialized Firebase app
        logger.info(f"Rejected bearer token: {type(e).__name__}")
        return None
