"""Signed-URL access to the attachment bucket.

The bucket itself lives behind an external object store; this service only
mints and checks the short-lived URLs clients use to upload and download, and
maps between storage paths and the ``/objects/...`` entity paths stored on
attachments.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Tuple
from urllib.parse import urlsplit

import jwt

from backend.app.core.errors import NotFoundError, ValidationError
from backend.app.core.settings import get_settings

ENTITY_PREFIX = "/objects/"
DOWNLOAD_TTL_SECONDS = 3600
UPLOAD_TTL_SECONDS = 900


def parse_object_path(path: str) -> Tuple[str, str]:
    if not path.startswith("/"):
        path = f"/{path}"
    parts = path.split("/")
    if len(parts) < 3 or not parts[2]:
        raise ValidationError("Invalid path: must contain at least a bucket name")
    return parts[1], "/".join(parts[2:])


class ObjectStorageService:
    def __init__(self, settings=None):
        settings = settings or get_settings()
        self.bucket = settings.object_storage_bucket
        self.private_dir = settings.object_storage_private_dir.strip("/")
        self.base_url = settings.object_storage_base_url.rstrip("/")
        self.secret_key = settings.SECRET_KEY

    @property
    def private_prefix(self) -> str:
        return f"/{self.bucket}/{self.private_dir}/"

    def sign_url(self, path: str, method: str, ttl_seconds: int = DOWNLOAD_TTL_SECONDS) -> str:
        bucket, object_name = parse_object_path(path)
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl_seconds)
        token = jwt.encode(
            {"bucket": bucket, "object": object_name, "method": method, "exp": expires_at},
            self.secret_key,
            algorithm="HS256",
        )
        return f"{self.base_url}/{bucket}/{object_name}?token={token}"

    def verify_signature(self, token: str) -> Dict[str, str]:
        try:
            return jwt.decode(token, self.secret_key, algorithms=["HS256"])
        except jwt.ExpiredSignatureError as exc:
            raise ValidationError("Signed URL has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise ValidationError("Invalid signed URL") from exc

    def get_upload_url(self) -> str:
        object_path = f"{self.private_prefix}uploads/{uuid.uuid4()}"
        return self.sign_url(object_path, "PUT", ttl_seconds=UPLOAD_TTL_SECONDS)

    def normalize_object_path(self, raw_path: str) -> str:
        """Turn a signed upload URL into the ``/objects/...`` path kept on the attachment."""
        if raw_path.startswith(ENTITY_PREFIX):
            return raw_path
        path = urlsplit(raw_path).path
        if self.base_url:
            base_path = urlsplit(self.base_url).path.rstrip("/")
            if base_path and path.startswith(base_path + "/"):
                path = path[len(base_path):]
        if not path.startswith(self.private_prefix) or path == self.private_prefix:
            raise ValidationError("File path does not point into the attachment bucket")
        return f"{ENTITY_PREFIX}{path[len(self.private_prefix):]}"

    def entity_to_storage_path(self, entity_path: str) -> str:
        if not entity_path.startswith(ENTITY_PREFIX) or entity_path == ENTITY_PREFIX:
            raise NotFoundError("File not found")
        return f"{self.private_prefix}{entity_path[len(ENTITY_PREFIX):]}"

    def get_download_url(self, entity_path: str) -> str:
        return self.sign_url(self.entity_to_storage_path(entity_path), "GET", ttl_seconds=DOWNLOAD_TTL_SECONDS)
