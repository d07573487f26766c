from pathlib import Path
from typing import Union, Iterable, List, Iterator
import logging
import os

import numpy as np
import cv2
from PIL import Image as PILImage
from dotenv import load_dotenv

from ..models.pixel_grid import PixelGrid

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

PPM_EXT = ".ppm"
PPM_MAGIC = "P3"
PPM_COMMENT = "# Created by rasteredit"


class ImageRepository:
    """
    Handles file I/O for PixelGrid entities.

    Plain-text PPM (P3) is parsed and written here; every other format is
    decoded by OpenCV and encoded by Pillow.
    """
    def __init__(self, valid_exts: Iterable[str] | None = None):
        if valid_exts is None:
            valid_exts = os.getenv("VALID_IMAGE_EXTENSIONS", ".ppm,.png,.jpg,.jpeg,.bmp").split(",")
        self.VALID_EXTS = {self._normalise_ext(ext) for ext in valid_exts if ext.strip()}

    @staticmethod
    def _normalise_ext(ext: str) -> str:
        ext = ext.strip().lower()
        return ext if ext.startswith(".") else f".{ext}"

    def _check_ext(self, path: Path) -> str:
        ext = path.suffix.lower()
        if ext not in self.VALID_EXTS:
            raise ValueError(f"Unsupported file format: {ext or path.name}")
        return ext

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None) -> PixelGrid:
        if path is None:
            return PixelGrid(pixels)
        return PixelGrid(pixels=pixels, path=Path(path))

    # ─── Loading ──────────────────────────────────────────────────────
    def load(self, path: Union[str, Path]) -> PixelGrid:
        path = Path(path)
        ext = self._check_ext(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found: {path}")

        if ext == PPM_EXT:
            grid = self._read_ppm(path)
        else:
            arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
            if arr_bgr is None:
                raise FileNotFoundError(f"Image not found or unreadable: {path}")
            grid = PixelGrid(pixels=arr_bgr[:, :, ::-1], path=path)

        logger.debug(f"Loaded {path} ({grid.width}x{grid.height})")
        return grid

    @staticmethod
    def _ppm_tokens(text: str) -> List[str]:
        tokens = []
        for line in text.splitlines():
            line = line.split("#", 1)[0]
            tokens.extend(line.split())
        return tokens

    def _read_ppm(self, path: Path) -> PixelGrid:
        tokens = self._ppm_tokens(path.read_text(encoding="ascii"))
        if not tokens or tokens[0] != PPM_MAGIC:
            raise ValueError(f"Invalid PPM file format (expected {PPM_MAGIC}): {path}")
        try:
            width, height, max_value = (int(t) for t in tokens[1:4])
            samples = np.array([int(t) for t in tokens[4:]], dtype=np.int64)
        except ValueError as err:
            raise ValueError(f"Malformed PPM data in {path}: {err}") from err

        expected = width * height * 3
        if width < 0 or height < 0 or max_value <= 0 or samples.size < expected:
            raise ValueError(
                f"Malformed PPM header in {path}: {width}x{height}, max {max_value}, "
                f"{samples.size} samples"
            )

        samples = samples[:expected].reshape(height, width, 3)
        if max_value != 255:
            samples = samples * 255 // max_value
        return PixelGrid(pixels=samples, path=path)

    # ─── Saving ───────────────────────────────────────────────────────
    def save(self, image: PixelGrid, path: Union[str, Path] = None) -> Path:
        if image is None:
            raise TypeError("Cannot save: image is None")
        path = Path(path) if path is not None else image.path
        if path is None:
            raise ValueError("Cannot save: no destination path given")
        ext = self._check_ext(path)

        if ext == PPM_EXT:
            self._write_ppm(image, path)
        else:
            PILImage.fromarray(np.ascontiguousarray(image.pixels)).save(path)

        logger.debug(f"Saved {image.width}x{image.height} image to {path}")
        return path

    @staticmethod
    def _write_ppm(image: PixelGrid, path: Path) -> None:
        lines = [PPM_MAGIC, PPM_COMMENT, f"{image.width} {image.height}", "255"]
        lines.extend(str(v) for v in image.pixels.reshape(-1).tolist())
        path.write_text("\n".join(lines) + "\n", encoding="ascii")

    # ─── Folders ──────────────────────────────────────────────────────
    def iter_dir(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[PixelGrid]:
        """
        Yield PixelGrid objects one at a time.  Nothing accumulates in memory.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)

        allowed = {self._normalise_ext(e) for e in (exts or self.VALID_EXTS)}
        pattern = "**/*" if recursive else "*"

        for p in sorted(folder.glob(pattern)):
            if not p.is_file() or p.suffix.lower() not in allowed:
                logger.debug(f"Skipping {p}")
                continue
            try:
                yield self.load(p)
            except (OSError, ValueError) as err:
                logger.warning(f"Skipping {p.name}: {err}")

    def load_dir(
        self, folder: Union[str, Path], *, recursive=False, exts=None
    ) -> List[PixelGrid]:
        """
        Helper that returns a list, but internally streams.
        """
        return list(self.iter_dir(folder, recursive=recursive, exts=exts))
