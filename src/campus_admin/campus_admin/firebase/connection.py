from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import firebase_admin
from firebase_admin import credentials, firestore

from ..core.exceptions import CredentialsMissingError

logger = logging.getLogger(__name__)

SETUP_GUIDE = (
    "serviceAccountKey.json not found!\n"
    "To fix this:\n"
    "1. Go to Firebase Console -> Project Settings\n"
    "2. Open the 'Service Accounts' tab\n"
    "3. Click 'Generate New Private Key'\n"
    "4. Save the JSON file as serviceAccountKey.json in the project root\n"
    "   (or point FIREBASE_CREDENTIALS_PATH at it)\n"
    "5. Keep the key out of version control and run again"
)


@dataclass
class FirebaseConfig:
    credentials_path: str
    project_id: Optional[str] = None
    # Raw service-account JSON, takes precedence over credentials_path.
    credentials_json: Optional[str] = None


def load_service_account(config: FirebaseConfig) -> dict:
    if config.credentials_json:
        return json.loads(config.credentials_json)

    path = Path(config.credentials_path)
    if not path.is_file():
        raise CredentialsMissingError(SETUP_GUIDE)
    with path.open(encoding="utf-8") as f:
        return json.load(f)


class FirebaseConnection:
    """Singleton-like Firebase Admin app holder.

    Note: firebase_admin keeps a process-wide registry of apps; initializing
    the default app twice raises, so the app is created lazily once.
    """

    _instance: Optional["FirebaseConnection"] = None

    def __init__(self, config: FirebaseConfig):
        self._config = config
        self._app: Optional[firebase_admin.App] = None

    @classmethod
    def get_instance(cls, config: FirebaseConfig) -> "FirebaseConnection":
        if cls._instance is None:
            cls._instance = FirebaseConnection(config)
        return cls._instance

    @property
    def app(self) -> firebase_admin.App:
        if self._app is None:
            self._app = self._initialize()
        return self._app

    def _initialize(self) -> firebase_admin.App:
        try:
            return firebase_admin.get_app()
        except ValueError:
            pass

        service_account = load_service_account(self._config)
        options: dict[str, Any] = {}
        project_id = self._config.project_id or service_account.get("project_id")
        if project_id:
            options["projectId"] = project_id

        app = firebase_admin.initialize_app(credentials.Certificate(service_account), options)
        logger.info("Firebase initialized for project %s", project_id or "<default>")
        return app

    def firestore(self):
        return firestore.client(app=self.app)
