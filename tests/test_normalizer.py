import struct
from io import BytesIO

import pytest
from PIL import Image

from app.core.exceptions import UnsupportedFormat
from app.services.normalizer import AssetNormalizer
from tests.fakes import image_bytes

TRANSCODE = {"heic", "heif", "tif", "tiff", "bmp"}


def test_passthrough_for_renderable_formats():
    data = image_bytes("PNG")
    asset = AssetNormalizer(TRANSCODE).normalize(data, "photo.png")
    assert asset.content is data
    assert asset.file_name == "photo.png"
    assert not asset.transcoded


def test_tiff_is_transcoded_to_png():
    asset = AssetNormalizer(TRANSCODE).normalize(image_bytes("TIFF"), "scan.final.TIFF")
    assert asset.transcoded
    assert asset.file_name == "scan.final.png"
    with Image.open(BytesIO(asset.content)) as decoded:
        assert decoded.format == "PNG"
        assert decoded.size == (4, 3)
        assert decoded.convert("RGB").getpixel((0, 0)) == (200, 30, 30)


def test_bmp_to_jpeg_target_rewrites_extension():
    asset = AssetNormalizer(TRANSCODE, target_format="jpeg").normalize(image_bytes("BMP"), "icon.bmp")
    assert asset.file_name == "icon.jpg"
    with Image.open(BytesIO(asset.content)) as decoded:
        assert decoded.format == "JPEG"


def test_corrupt_source_raises_unsupported_format():
    with pytest.raises(UnsupportedFormat) as exc_info:
        AssetNormalizer(TRANSCODE).normalize(b"definitely not an image", "holiday.heic")
    assert exc_info.value.status_code == 400
    assert "HEIC" in exc_info.value.message


def test_oversized_dimensions_raise_unsupported_format():
    header = struct.pack("<2sIHHI", b"BM", 70, 0, 0, 54)
    info = struct.pack("<IiiHHIIiiII", 40, 20000, 20000, 1, 24, 0, 0, 2835, 2835, 0, 0)
    data = header + info + b"\x00" * 16

    with pytest.raises(UnsupportedFormat) as exc_info:
        AssetNormalizer(TRANSCODE).normalize(data, "huge.bmp")
    assert exc_info.value.status_code == 400
