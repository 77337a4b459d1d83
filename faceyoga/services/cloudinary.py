import logging
from typing import Optional
from urllib.parse import urlparse

from faceyoga.core.config import settings
import cloudinary
import cloudinary.uploader

logger = logging.getLogger(__name__)

cloudinary.config(
    cloud_name=settings.CLOUDINARY_CLOUD_NAME,
    api_key=settings.CLOUDINARY_API_KEY,
    api_secret=settings.CLOUDINARY_API_SECRET,
)


def public_id_from_url(url: Optional[str]) -> Optional[str]:
    """``https://res.cloudinary.com/<cloud>/image/upload/v123/avatars/abc.jpg`` -> ``avatars/abc``."""
    if not url:
        return None
    path = urlparse(url).path
    if "/upload/" not in path:
        return None
    tail = path.split("/upload/", 1)[1]
    parts = tail.split("/")
    if parts and parts[0].startswith("v") and parts[0][1:].isdigit():
        parts = parts[1:]
    if not parts:
        return None
    return "/".join(parts).rsplit(".", 1)[0]


class CloudinaryService:

    def upload_image(self, file: bytes, folder: Optional[str] = None) -> str:
        options = {"resource_type": "image"}
        if folder:
            options["folder"] = folder
        result = cloudinary.uploader.upload(file, **options)
        return result["secure_url"]

    def delete_image(self, url: Optional[str]) -> bool:
        """Best-effort removal of a previously uploaded image."""
        public_id = public_id_from_url(url)
        if not public_id:
            return False
        try:
            result = cloudinary.uploader.destroy(public_id, resource_type="image")
        except Exception as e:
            logger.warning(f"Could not delete image {public_id}: {e}")
            return False
        return result.get("result") == "ok"

cloudinary_service = CloudinaryService()
