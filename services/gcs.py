# -*- coding: utf-8 -*-

import os
import json
import base64
import datetime
import logging

from google.api_core.exceptions import GoogleAPIError
from google.cloud import storage

from config import GCS_INPUT_BUCKET, GCS_OUTPUT_BUCKET
from services.errors import StorageUnavailableError

logger = logging.getLogger("api.gcs")

# =========================================================
# LAZY CLIENT
# =========================================================
_client = None


def _get_client():
    global _client
    if _client is not None:
        return _client

    creds_b64 = os.getenv("GOOGLE_APPLICATION_CREDENTIALS_JSON")
    if creds_b64:
        creds = json.loads(base64.b64decode(creds_b64))
        _client = storage.Client.from_service_account_info(creds)
    else:
        _client = storage.Client()

    return _client


# =========================================================
# CONTAINER (ONE BUCKET PER LOGICAL CONTAINER)
# =========================================================
class GcsContainer:
    """
    One logical container of the object store, backed by a GCS bucket.

    Every SDK failure surfaces as StorageUnavailableError; callers do not
    distinguish "unreachable" from "permission denied".
    """

    def __init__(self, bucket_name: str):
        if not bucket_name:
            raise RuntimeError("bucket name not set")
        self.name = bucket_name

    def _bucket(self):
        return _get_client().bucket(self.name)

    def _fail(self, op: str, exc: Exception) -> StorageUnavailableError:
        logger.error("gcs_call_failed op=%s bucket=%s error=%s: %s", op, self.name, exc.__class__.__name__, exc)
        return StorageUnavailableError(f"{op} failed on {self.name}", container=self.name)

    def list_names(self, prefix: str) -> list[str]:
        try:
            blobs = _get_client().list_blobs(self.name, prefix=prefix)
            return [blob.name for blob in blobs]
        except GoogleAPIError as exc:
            raise self._fail("list", exc) from exc

    def read_bytes(self, name: str) -> bytes:
        try:
            return self._bucket().blob(name).download_as_bytes()
        except GoogleAPIError as exc:
            raise self._fail("read", exc) from exc

    def exists(self, name: str) -> bool:
        try:
            return bool(self._bucket().blob(name).exists())
        except GoogleAPIError as exc:
            raise self._fail("exists", exc) from exc

    def write_json(self, name: str, payload: dict) -> None:
        body = json.dumps(payload, indent=2, ensure_ascii=False)
        try:
            self._bucket().blob(name).upload_from_string(
                body,
                content_type="application/json; charset=utf-8",
            )
        except GoogleAPIError as exc:
            raise self._fail("write", exc) from exc

    # =========================================================
    # SIGNED URLS
    # =========================================================
    def signed_upload_url(
        self,
        name: str,
        *,
        content_type: str | None = None,
        expires_minutes: int = 60,
    ) -> str:
        """
        Browser-writable HTTPS URL for a single object (PUT).
        """
        try:
            return self._bucket().blob(name).generate_signed_url(
                version="v4",
                expiration=datetime.timedelta(minutes=expires_minutes),
                method="PUT",
                content_type=content_type or None,
            )
        except GoogleAPIError as exc:
            raise self._fail("sign_upload", exc) from exc

    def signed_download_url(self, name: str, *, expires_minutes: int = 60) -> str:
        """
        Browser-readable HTTPS URL, used for audio streaming.
        """
        try:
            return self._bucket().blob(name).generate_signed_url(
                version="v4",
                expiration=datetime.timedelta(minutes=expires_minutes),
                method="GET",
            )
        except GoogleAPIError as exc:
            raise self._fail("sign_download", exc) from exc


# =========================================================
# FASTAPI DEPENDENCIES
# =========================================================
def get_input_container() -> GcsContainer:
    return GcsContainer(GCS_INPUT_BUCKET)


def get_output_container() -> GcsContainer:
    return GcsContainer(GCS_OUTPUT_BUCKET)
