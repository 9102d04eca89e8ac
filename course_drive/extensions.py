import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import firebase_admin
import sentry_sdk
from firebase_admin import auth, credentials, firestore
from flask import jsonify
from sentry_sdk.integrations.flask import FlaskIntegration

from .config import AppConfig
from .logging_config import get_logger
from .repositories.drive_repo import DriveListingClient
from .services import auth_service
from .services.cache_store import TreeCache
from .services.tree_sync_service import TreeCacheSync

EXTENSION_KEY = 'course_drive'
FIREBASE_CREDENTIALS_FILE = 'firebase-credentials.json'


@dataclass
class AppContext:
    """Collaborators handed to the API service handlers."""

    config: AppConfig
    tree_sync: TreeCacheSync
    logger: logging.Logger
    db: Any = None
    auth_module: Any = None
    jsonify: Callable = field(default=jsonify)

    def verify_firebase_token(self, request):
        return auth_service.verify_firebase_token(request, auth_module=self.auth_module, logger=self.logger)

    def capture_exception(self, exc):
        if self.config.sentry_dsn:
            sentry_sdk.capture_exception(exc)


def init_sentry(config: AppConfig) -> bool:
    if not config.sentry_dsn:
        return False
    sentry_sdk.init(
        dsn=config.sentry_dsn,
        integrations=[FlaskIntegration()],
        traces_sample_rate=config.sentry_traces_sample_rate,
        send_default_pii=False,
        environment=config.sentry_environment,
        release=config.sentry_release,
    )
    return True


def init_firebase(config: AppConfig, logger):
    """Return a Firestore client, or None when no credentials are available."""
    try:
        if os.path.exists(FIREBASE_CREDENTIALS_FILE):
            cred = credentials.Certificate(FIREBASE_CREDENTIALS_FILE)
        elif config.firebase_credentials:
            cred = credentials.Certificate(json.loads(config.firebase_credentials))
        else:
            logger.info("FIREBASE_CREDENTIALS is not set; enrollment falls back to query parameters.")
            return None
        if not firebase_admin._apps:
            firebase_admin.initialize_app(cred)
        return firestore.client()
    except Exception as e:
        logger.info(f"Firebase initialization skipped: {e}")
        return None


def build_tree_sync(config: AppConfig, listing_client=None, clock=None) -> TreeCacheSync:
    if listing_client is None:
        listing_client = DriveListingClient(
            config.google_service_account_key_file,
            page_size=config.drive_page_size,
            num_retries=config.drive_api_num_retries,
        )
    return TreeCacheSync(
        listing_client,
        TreeCache(config.drive_cache_ttl_seconds, clock=clock),
        max_workers=config.drive_max_concurrent_listings,
        cache_degraded_trees=config.drive_cache_degraded_trees,
    )


def init_extensions(app, config: AppConfig, tree_sync: Optional[TreeCacheSync] = None, db=None) -> AppContext:
    logger = get_logger()
    init_sentry(config)
    if db is None and not app.testing:
        db = init_firebase(config, logger)
    if tree_sync is None:
        tree_sync = build_tree_sync(config)
    app_ctx = AppContext(
        config=config,
        tree_sync=tree_sync,
        logger=logger,
        db=db,
        auth_module=auth if db is not None else None,
    )
    app.extensions[EXTENSION_KEY] = app_ctx
    return app_ctx


def get_app_ctx(app) -> AppContext:
    return app.extensions[EXTENSION_KEY]
