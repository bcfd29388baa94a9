# proofpage/api/v1/media.py
from flask import Blueprint, Response, abort, request
from proofpage.utils.media import get_object_store
from proofpage.utils.thumbnails import render_cover_jpeg

media_bp = Blueprint("media", __name__)


@media_bp.route("/media/<bucket>/<path:object_path>", methods=["GET"])
def serve_object(bucket, object_path):
    """
    Serve an object behind a signed URL.

    A resize transform carried in the token is applied on the fly as a
    cover-cropped JPEG.
    """
    store = get_object_store()
    if bucket != store.bucket:
        abort(404)

    transform = store.verify_signed_url(object_path, request.args.get("token", ""))

    if not store.exists(object_path):
        abort(404)

    data = store.download(object_path)
    meta = store.metadata(object_path)

    if transform:
        return Response(render_cover_jpeg(data, transform), mimetype="image/jpeg")

    response = Response(data, mimetype=meta.get("content_type") or "application/octet-stream")
    if meta.get("cache_control"):
        response.headers["Cache-Control"] = f"max-age={meta['cache_control']}"
    return response
