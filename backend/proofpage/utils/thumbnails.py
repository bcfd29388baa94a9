from io import BytesIO
from typing import Optional, Tuple
from urllib.parse import unquote, urlparse

from PIL import Image, ImageOps

JPEG_QUALITY = 82
AVATAR_SIZE = (256, 256)
WORK_IMAGE_SIZE = (640, 360)


def resolve_object_path(reference: Optional[str], bucket: str) -> Optional[str]:
    """
    Map a stored media reference to an object path inside `bucket`.

    Accepts a full (signed) URL containing `/<bucket>/`, a path prefixed
    with `<bucket>/`, or a bare relative path. Returns None when the
    reference is empty or a URL that does not point into the bucket.
    """
    if not reference or not isinstance(reference, str):
        return None

    value = reference.strip()
    if not value:
        return None

    if value.startswith(("http://", "https://")):
        try:
            url_path = urlparse(value).path
        except ValueError:
            return None

        marker = f"/{bucket}/"
        idx = url_path.find(marker)
        if idx < 0:
            return None
        return unquote(url_path[idx + len(marker):]) or None

    if value.startswith(f"{bucket}/"):
        return value[len(bucket) + 1:] or None

    return value


def build_thumb_path(original_path: str) -> str:
    """`a/b/photo.png` -> `a/b/thumbs/photo-thumb.jpg`."""
    directory, _, file_name = original_path.rpartition("/")
    dot = file_name.rfind(".")
    base = file_name[:dot] if dot > 0 else file_name
    thumb = f"thumbs/{base}-thumb.jpg"
    return f"{directory}/{thumb}" if directory else thumb


def render_cover_jpeg(data: bytes, size: Tuple[int, int], quality: int = JPEG_QUALITY) -> bytes:
    """
    Resize image bytes to exactly `size`, cropping around the center to
    cover the box, and encode the result as JPEG.
    """
    with Image.open(BytesIO(data)) as source:
        image = ImageOps.exif_transpose(source)

        if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
            rgba = image.convert("RGBA")
            background = Image.new("RGB", rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.getchannel("A"))
            image = background
        else:
            image = image.convert("RGB")

        thumb = ImageOps.fit(image, size, method=Image.Resampling.LANCZOS, centering=(0.5, 0.5))

    out = BytesIO()
    thumb.save(out, format="JPEG", quality=quality, optimize=True, progressive=True)
    return out.getvalue()
