"""Image header probing."""

from __future__ import annotations

import threading
import warnings
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from boxmanifest.errors import DatasetIOError, ImageDecodeError


_PIXEL_LIMIT_LOCK = threading.Lock()


def _open_size(path: Path) -> tuple[int, int]:
    # Only the header is read, so Pillow's decompression bomb guard never applies.
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", Image.DecompressionBombWarning)
        try:
            with Image.open(path) as img:
                return img.size
        except Image.DecompressionBombError:
            pass

        with _PIXEL_LIMIT_LOCK:
            limit = Image.MAX_IMAGE_PIXELS
            Image.MAX_IMAGE_PIXELS = None
            try:
                with Image.open(path) as img:
                    return img.size
            finally:
                Image.MAX_IMAGE_PIXELS = limit


def probe_image_size(path: Path) -> tuple[int, int]:
    """Return (width, height) read from the image header without decoding pixels."""
    try:
        width, height = _open_size(path)
    except UnidentifiedImageError as exc:
        raise ImageDecodeError(f"Could not decode image header: {path}") from exc
    except (FileNotFoundError, PermissionError, IsADirectoryError) as exc:
        raise DatasetIOError(f"Could not open image {path}: {exc}") from exc
    except (OSError, SyntaxError, ValueError) as exc:
        # Pillow raises plain OSError/SyntaxError for truncated or malformed headers.
        raise ImageDecodeError(f"Could not decode image header {path}: {exc}") from exc

    if width <= 0 or height <= 0:
        raise ImageDecodeError(f"Image has invalid dimensions {width}x{height}: {path}")
    return width, height
