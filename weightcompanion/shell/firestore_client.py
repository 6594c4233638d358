"""Firestore Backend - Durable key-value storage for the entry store.

This module handles all database I/O. Serialization and failure handling live
in the entry store; this backend lets exceptions propagate.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from google.cloud import firestore


logger = logging.getLogger(__name__)


@dataclass
class FirestoreConfig:
    """Configuration for Firestore backend.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
        namespace: Document holding this deployment's storage keys
    """

    project_id: str | None = None
    database: str | None = None
    namespace: str = "default"


class FirestoreBackend:
    """Stores each key as one Firestore document.

    Document structure:
        companions/{namespace}/storage/{key}: { value: "<json>", updated_at }
    """

    def __init__(self, config: FirestoreConfig | None = None) -> None:
        """Initialize Firestore backend.

        Args:
            config: Firestore configuration
        """
        self.config = config or FirestoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs: dict[str, Any] = {}
            if self.config.project_id:
                kwargs["project"] = self.config.project_id
            if self.config.database:
                kwargs["database"] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def _key_ref(self, key: str) -> firestore.DocumentReference:
        """Get reference to the document for a storage key."""
        return (
            self.client.collection("companions")
            .document(self.config.namespace)
            .collection("storage")
            .document(key)
        )

    def read(self, key: str) -> str | None:
        """Fetch the raw value for a key, or None if it was never written."""
        logger.debug("Fetching %s from namespace %s", key, self.config.namespace)
        doc = self._key_ref(key).get()
        if not doc.exists:
            return None
        return doc.to_dict().get("value")

    def write(self, key: str, value: str) -> None:
        """Replace the raw value for a key."""
        self._key_ref(key).set({
            "value": value,
            "updated_at": datetime.now(timezone.utc),
        })
