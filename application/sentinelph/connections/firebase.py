"""
Firebase Admin app and Firestore client access.
"""
import os

import firebase_admin
from firebase_admin import credentials, firestore

# Logger
from sentinelph.logging.utils import get_app_logger
logger = get_app_logger("firebase")

# Settings
from sentinelph.config.settings import SentinelConfigs
configs = SentinelConfigs()


def init_firebase():
    """Initialize the named Firebase app once per process."""
    try:
        return firebase_admin.get_app(configs.FIREBASE_APP_NAME)
    except ValueError:
        pass

    if os.path.exists(configs.FIREBASE_CREDENTIALS_PATH):
        cred = credentials.Certificate(configs.FIREBASE_CREDENTIALS_PATH)
    else:
        logger.warning(f"firebase_credentials_missing | path={configs.FIREBASE_CREDENTIALS_PATH} fallback=application_default")
        cred = credentials.ApplicationDefault()

    app_instance = firebase_admin.initialize_app(cred, name=configs.FIREBASE_APP_NAME)
    logger.info(f"firebase_initialized | app={configs.FIREBASE_APP_NAME}")
    return app_instance


def get_firebase_app():
    return firebase_admin.get_app(configs.FIREBASE_APP_NAME)


def get_firestore_client():
    return firestore.client(app=get_firebase_app(), database_id=configs.FIRESTORE_DATABASE)
