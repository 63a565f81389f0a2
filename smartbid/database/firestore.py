"""Firestore client factory.

The service account is supplied as a JSON string (``FIREBASE_SERVICE_ACCOUNT``)
so the backend can run on hosts without a credentials file.
"""

import inspect
import json
import logging
from typing import Optional

from google.cloud import firestore
from google.oauth2 import service_account

from smartbid.core.conf import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def create_firestore_client(settings: Settings = default_settings) -> Optional[firestore.AsyncClient]:
    """Build an async Firestore client, or None if no service account is configured.

    Raises:
        ValueError: If the service account is not valid JSON credentials
    """
    if not settings.FIREBASE_SERVICE_ACCOUNT:
        return None

    try:
        info = json.loads(settings.FIREBASE_SERVICE_ACCOUNT)
    except json.JSONDecodeError as e:
        raise ValueError(f'FIREBASE_SERVICE_ACCOUNT is not valid JSON: {e}') from e
    if not isinstance(info, dict):
        raise ValueError('FIREBASE_SERVICE_ACCOUNT must be a JSON object')

    credentials = service_account.Credentials.from_service_account_info(info)
    client = firestore.AsyncClient(project=info.get('project_id'), credentials=credentials)
    logger.info(f"[FIRESTORE] Client created for project {info.get('project_id')}")
    return client


async def close_firestore_client(client: Optional[firestore.AsyncClient]) -> None:
    if client is None:
        return
    result = client.close()
    if inspect.isawaitable(result):
        await result
