from pathlib import Path
from typing import Iterable, Iterator, Union
import logging

import numpy as np

from ..models.pixel_grid import PixelGrid
from ..repositories.image_repository import ImageRepository

logger = logging.getLogger(__name__)


def require_grid(image, name: str = "image") -> PixelGrid:
    """Fail fast on an absent or foreign input grid."""
    if image is None:
        raise TypeError(f"{name} is required, got None")
    if not isinstance(image, PixelGrid):
        raise TypeError(f"{name} must be a PixelGrid, got {type(image).__name__}")
    return image


class ImageService:
    """I/O helpers and grid construction.  No transform logic here."""
    def __init__(self, image_repository: ImageRepository | None = None):
        self.image_repository = image_repository or ImageRepository()

    def create_image(self, pixels: np.ndarray, path: Union[str, Path] = None) -> PixelGrid:
        return self.image_repository.create_image(pixels, path)

    @staticmethod
    def create_blank(width: int, height: int) -> PixelGrid:
        return PixelGrid.blank(width, height)

    @staticmethod
    def from_planes(red, green, blue) -> PixelGrid:
        return PixelGrid.from_planes(red, green, blue)

    def load(self, path: str | Path) -> PixelGrid:
        """Load a single image from disk into a PixelGrid."""
        return self.image_repository.load(path)

    def stream_gallery(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[PixelGrid]:
        """
        Yield images lazily instead of returning a gigantic list.
        """
        return self.image_repository.iter_dir(folder, recursive=recursive, exts=exts)

    def save(self, image: PixelGrid, path: Union[str, Path] = None) -> Path:
        """
        Save the image to `path`, or to the path it was loaded from.
        """
        return self.image_repository.save(require_grid(image), path)

    @staticmethod
    def get_image_dimensions(img: PixelGrid):
        """Return (width, height)."""
        require_grid(img)
        return img.width, img.height
