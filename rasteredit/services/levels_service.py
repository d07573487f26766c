import logging

from ..models.levels_curve import LevelsCurve
from ..models.pixel_grid import PixelGrid
from .image_service import require_grid

logger = logging.getLogger(__name__)


class LevelsService:
    """Quadratic tone curve anchored at shadow, midtone and highlight points."""

    @staticmethod
    def build_curve(shadow: int, midtone: int, highlight: int) -> LevelsCurve:
        return LevelsCurve.from_points(shadow, midtone, highlight)

    def levels_adjust(self, image: PixelGrid, shadow: int, midtone: int, highlight: int) -> PixelGrid:
        """
        Map every channel of every pixel through the curve that sends
        shadow -> 0, midtone -> 128 and highlight -> 255.
        """
        require_grid(image)
        curve = self.build_curve(shadow, midtone, highlight)
        logger.debug(f"Levels b={curve.shadow} m={curve.midtone} w={curve.highlight} "
                     f"-> a={curve.a:.6g} b={curve.b:.6g} c={curve.c:.6g}")
        return PixelGrid(curve.lookup_table()[image.pixels])
