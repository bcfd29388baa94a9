import time

import pytest

from proofpage.domain.exceptions import NotFound, StorageError
from proofpage.utils.media import LocalObjectStore, build_upload_path


@pytest.fixture
def local_store(tmp_path):
    return LocalObjectStore(tmp_path, "proof-media", "secret", signed_url_ttl=60)


def _token(url):
    return url.split("token=", 1)[1]


class TestLocalObjectStore:
    def test_upload_without_overwrite(self, local_store):
        local_store.upload("u/p/a.png", b"one", content_type="image/png")

        with pytest.raises(StorageError):
            local_store.upload("u/p/a.png", b"two", content_type="image/png")

        local_store.upload("u/p/a.png", b"two", content_type="image/png", upsert=True)
        assert local_store.download("u/p/a.png") == b"two"

    def test_download_missing(self, local_store):
        with pytest.raises(StorageError):
            local_store.download("u/p/missing.png")

    def test_rejects_path_escape(self, local_store):
        with pytest.raises(StorageError):
            local_store.upload("../outside.png", b"x", content_type="image/png")


class TestSignedUrls:
    def test_round_trip_with_transform(self, local_store):
        url = local_store.create_signed_url("u/p/a.png", transform=(192, 192))

        assert url.startswith("/media/proof-media/u/p/a.png?token=")
        assert local_store.verify_signed_url("u/p/a.png", _token(url)) == (192, 192)

    def test_tampered_token(self, local_store):
        url = local_store.create_signed_url("u/p/a.png")

        with pytest.raises(NotFound):
            local_store.verify_signed_url("u/p/a.png", _token(url)[:-2] + "xx")

    def test_token_bound_to_path(self, local_store):
        url = local_store.create_signed_url("u/p/a.png")

        with pytest.raises(NotFound):
            local_store.verify_signed_url("u/p/b.png", _token(url))

    def test_expired_token(self, local_store, monkeypatch):
        real_time = time.time
        monkeypatch.setattr(time, "time", lambda: real_time() - 120)
        url = local_store.create_signed_url("u/p/a.png", expires_in=60)
        monkeypatch.setattr(time, "time", real_time)

        with pytest.raises(NotFound):
            local_store.verify_signed_url("u/p/a.png", _token(url))


class TestUploadPath:
    def test_clean_name(self):
        path = build_upload_path("user-1", "page-1", "My Photo_Final.PNG")
        user, page, name = path.split("/")

        assert (user, page) == ("user-1", "page-1")
        assert name.endswith("-my-photo-final.png")

    def test_rejects_non_images(self):
        from proofpage.domain.exceptions import ValidationError

        with pytest.raises(ValidationError):
            build_upload_path("u", "p", "notes.txt")
