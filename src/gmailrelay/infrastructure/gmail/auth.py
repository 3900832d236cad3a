"""Google API credentials and service handles for Gmail and Sheets."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import google.auth
import google_auth_httplib2
import httplib2
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from loguru import logger


@dataclass(frozen=True)
class GoogleCredentialsConfig:
    scopes: Sequence[str]
    token_file: Optional[str] = None
    service_account_file: Optional[str] = None
    delegated_user: Optional[str] = None
    timeout: float = 30.0


class GoogleAuthenticator:
    """
    Resolves credentials once and builds discovery services on demand.

    httplib2 connections are not thread-safe, so each thread gets its own
    service objects.
    """

    def __init__(self, cfg: GoogleCredentialsConfig) -> None:
        self.cfg = cfg
        self._credentials: Any = None
        self._lock = threading.Lock()
        self._local = threading.local()

    def credentials(self) -> Any:
        with self._lock:
            if self._credentials is None:
                self._credentials = self._load_credentials()
            return self._credentials

    def _load_credentials(self) -> Any:
        scopes = list(self.cfg.scopes)
        if self.cfg.token_file:
            logger.info(f"Using authorized-user credentials from {self.cfg.token_file}")
            return Credentials.from_authorized_user_file(self.cfg.token_file, scopes)
        if self.cfg.service_account_file:
            logger.info(f"Using service account credentials (subject={self.cfg.delegated_user})")
            return service_account.Credentials.from_service_account_file(
                self.cfg.service_account_file, scopes=scopes, subject=self.cfg.delegated_user
            )
        logger.info("Using application default credentials")
        creds, _ = google.auth.default(scopes=scopes)
        return creds

    def service(self, api: str, version: str) -> Any:
        services = getattr(self._local, "services", None)
        if services is None:
            services = self._local.services = {}
        key = (api, version)
        if key not in services:
            http = google_auth_httplib2.AuthorizedHttp(
                self.credentials(), http=httplib2.Http(timeout=self.cfg.timeout)
            )
            services[key] = build(api, version, http=http, cache_discovery=False)
        return services[key]
