from __future__ import annotations

import logging

import firebase_admin
from firebase_admin import credentials, firestore

from app.core.config import settings

logger = logging.getLogger(__name__)


def get_firestore_client(credentials_path: str | None = None, project_id: str | None = None):
    """Initialize the default Firebase app once and return its Firestore client."""
    try:
        app = firebase_admin.get_app()
    except ValueError:
        path = credentials_path or settings.FIREBASE_CREDENTIALS_PATH
        project = project_id or settings.FIREBASE_PROJECT_ID
        cred = credentials.Certificate(path) if path else credentials.ApplicationDefault()
        app = firebase_admin.initialize_app(cred, {"projectId": project} if project else None)
        logger.info("Firebase app initialized", extra={"reason": project or "default project"})
    return firestore.client(app)
