import json
import mimetypes
import os
import posixpath
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import quote, urlencode

from flask import current_app
from itsdangerous import BadSignature, URLSafeTimedSerializer
from werkzeug.utils import secure_filename

from proofpage.domain.exceptions import NotFound, StorageError, ValidationError

ALLOWED_IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}
META_SUFFIX = ".meta.json"


def allowed_file(filename):
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_IMAGE_EXTENSIONS


class LocalObjectStore:
    """
    A single storage bucket kept on the local filesystem.

    Objects are addressed by relative, slash-separated paths. Reads are
    handed out through signed, expiring URLs that the media blueprint
    verifies before serving.
    """

    def __init__(self, root, bucket, secret_key, *, signed_url_ttl=3600, url_prefix="/media"):
        self.bucket = bucket
        self.root = Path(root) / bucket
        self.signed_url_ttl = signed_url_ttl
        self.url_prefix = url_prefix.rstrip("/")
        self._serializer = URLSafeTimedSerializer(secret_key, salt=f"signed-object:{bucket}")

    # -------------------------------------------------
    # Paths
    # -------------------------------------------------
    def _object_file(self, path: str) -> Path:
        clean = posixpath.normpath((path or "").strip().lstrip("/"))
        if not clean or clean == "." or clean.startswith("..") or clean.endswith(META_SUFFIX):
            raise StorageError(f"Invalid object path: {path!r}")
        return self.root.joinpath(*clean.split("/"))

    def exists(self, path: str) -> bool:
        return self._object_file(path).is_file()

    # -------------------------------------------------
    # Reads / writes
    # -------------------------------------------------
    def download(self, path: str) -> bytes:
        file_path = self._object_file(path)
        try:
            return file_path.read_bytes()
        except FileNotFoundError as exc:
            raise StorageError(f"Object not found: {path}") from exc
        except OSError as exc:
            raise StorageError(f"Download failed for {path}: {exc}") from exc

    def upload(self, path: str, data: bytes, *, content_type: str, upsert: bool = False,
               cache_control: Optional[str] = None) -> str:
        file_path = self._object_file(path)
        if file_path.exists() and not upsert:
            raise StorageError(f"Object already exists: {path}")

        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(data)
            meta = {"content_type": content_type, "cache_control": cache_control}
            Path(f"{file_path}{META_SUFFIX}").write_text(json.dumps(meta))
        except OSError as exc:
            raise StorageError(f"Upload failed for {path}: {exc}") from exc

        return path

    def metadata(self, path: str) -> dict:
        meta_file = Path(f"{self._object_file(path)}{META_SUFFIX}")
        if meta_file.is_file():
            return json.loads(meta_file.read_text())
        return {"content_type": mimetypes.guess_type(path)[0] or "application/octet-stream"}

    # -------------------------------------------------
    # Signed URLs
    # -------------------------------------------------
    def create_signed_url(self, path: str, expires_in: Optional[int] = None,
                          transform: Optional[Tuple[int, int]] = None) -> str:
        payload = {"p": path, "e": expires_in or self.signed_url_ttl}
        if transform:
            payload["w"], payload["h"] = transform

        token = self._serializer.dumps(payload)
        return f"{self.url_prefix}/{self.bucket}/{quote(path)}?{urlencode({'token': token})}"

    def verify_signed_url(self, path: str, token: str) -> Optional[Tuple[int, int]]:
        """
        Check a signed URL token against the requested path.

        Returns the resize transform baked into the token, if any.
        """
        try:
            payload, issued_at = self._serializer.loads(token, return_timestamp=True)
        except BadSignature as exc:
            raise NotFound("Invalid signed URL") from exc

        age = (datetime.now(timezone.utc) - issued_at).total_seconds()
        if age > payload.get("e", self.signed_url_ttl):
            raise NotFound("Signed URL has expired")

        if payload.get("p") != path:
            raise NotFound("Invalid signed URL")

        if "w" in payload and "h" in payload:
            return int(payload["w"]), int(payload["h"])
        return None


def init_object_store(app):
    store = LocalObjectStore(
        app.config["STORAGE_ROOT"],
        app.config["STORAGE_BUCKET"],
        app.config["SECRET_KEY"],
        signed_url_ttl=app.config["SIGNED_URL_TTL"],
    )
    app.extensions["object_store"] = store
    return store


def get_object_store() -> LocalObjectStore:
    return current_app.extensions["object_store"]


def build_upload_path(user_id, page_id, filename):
    """
    `<user_id>/<page_id>/<uuid>-<clean name>.<ext>` for a user upload.
    """
    if not filename or not allowed_file(filename):
        raise ValidationError("Please upload a PNG, JPG, GIF or WEBP image.")

    base, ext = os.path.splitext(filename)
    clean = secure_filename(base).replace("_", "-").lower() or "file"
    return f"{user_id}/{page_id}/{uuid.uuid4()}-{clean}{ext.lower()}"


def save_upload(store, file, *, user_id, page_id):
    if file is None or not file.filename:
        raise ValidationError("Please select an image file.")

    data = file.read()
    if not data:
        raise ValidationError("Please select an image file.")

    object_path = build_upload_path(user_id, page_id, file.filename)
    content_type = file.mimetype or mimetypes.guess_type(file.filename)[0] or "application/octet-stream"

    store.upload(object_path, data, content_type=content_type, upsert=False)
    current_app.logger.info("Uploaded %s (%d bytes)", object_path, len(data))
    return object_path


def signed_media_url(store, thumb_path, original_path, size=None):
    """Sign the derived thumbnail when present, otherwise the original."""
    path = thumb_path or original_path
    if not path:
        return None
    return store.create_signed_url(path, transform=size)
