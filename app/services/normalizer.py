from dataclasses import dataclass
from io import BytesIO
from pathlib import PurePath

import pillow_heif
import structlog
from PIL import Image, UnidentifiedImageError

from app.core.exceptions import UnsupportedFormat

logger = structlog.get_logger()

pillow_heif.register_heif_opener()

_SAVE_OPTIONS = {
    "png": {"optimize": False},
    "jpeg": {"quality": 100, "subsampling": 0},
    "webp": {"lossless": True},
}
_EXTENSIONS = {"png": "png", "jpeg": "jpg", "webp": "webp"}
_LOSSLESS_MODES = {"1", "L", "LA", "P", "RGB", "RGBA"}


@dataclass
class NormalizedAsset:
    content: bytes
    file_name: str
    transcoded: bool = False


def file_extension(file_name: str) -> str:
    return PurePath(file_name or "").suffix.lower().lstrip(".")


class AssetNormalizer:
    def __init__(self, transcode_extensions: set[str], target_format: str = "png") -> None:
        self.transcode_extensions = transcode_extensions
        self.target_format = target_format

    def needs_transcoding(self, file_name: str) -> bool:
        return file_extension(file_name) in self.transcode_extensions

    def _target_mode(self, source: Image.Image) -> Image.Image:
        if self.target_format == "jpeg":
            return source.convert("RGB")
        if source.mode in _LOSSLESS_MODES:
            return source.copy()
        return source.convert("RGBA")

    def normalize(self, content: bytes, file_name: str) -> NormalizedAsset:
        if not self.needs_transcoding(file_name):
            return NormalizedAsset(content=content, file_name=file_name)

        try:
            with Image.open(BytesIO(content)) as source:
                image = self._target_mode(source)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            logger.warning("image_decode_failed", file_name=file_name, error=str(exc))
            raise UnsupportedFormat(
                f"Could not decode {file_extension(file_name).upper()} image", detail=str(exc)
            ) from exc

        buffer = BytesIO()
        image.save(buffer, format=self.target_format.upper(), **_SAVE_OPTIONS[self.target_format])
        new_name = str(PurePath(file_name).with_suffix(f".{_EXTENSIONS[self.target_format]}"))
        logger.info(
            "image_transcoded",
            source=file_name,
            target=new_name,
            size_in=len(content),
            size_out=buffer.tell(),
        )
        return NormalizedAsset(content=buffer.getvalue(), file_name=new_name, transcoded=True)
