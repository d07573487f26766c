"""
Live Preview Pipeline
Runs one operation on an image and composes a before/after split view,
the way an editor shows a preview before an edit is committed.
"""
import logging
from typing import Callable

from ..models.operations import SplitSide
from ..models.pixel_grid import PixelGrid
from ..services.composition_service import CompositionService
from ..services.levels_service import LevelsService

logger = logging.getLogger(__name__)


def split_preview(
    image: PixelGrid,
    operation: Callable[[PixelGrid], PixelGrid],
    split_percentage: float,
    *,
    composition_service: CompositionService = CompositionService(),
    processed_side: SplitSide = SplitSide.LEFT,
) -> PixelGrid:
    """
    Apply `operation` to `image` and show the result next to the original.

    Args:
        image: Source image, left untouched.
        operation: Any grid -> grid transform, e.g. TransformService().blur.
        split_percentage: Share of the width (0-100) showing the processed image.
        composition_service: Service composing the split view.
        processed_side: Side of the view that shows the processed image.

    Returns:
        PixelGrid: The composed preview.
    """
    processed = operation(image)
    logger.debug(f"Preview of {getattr(operation, '__name__', operation)} at {split_percentage}%")
    return composition_service.apply_split_view(
        image, processed, split_percentage, processed_side=processed_side
    )


def levels_preview(
    image: PixelGrid,
    shadow: int,
    midtone: int,
    highlight: int,
    split_percentage: float,
    *,
    levels_service: LevelsService = LevelsService(),
    composition_service: CompositionService = CompositionService(),
    processed_side: SplitSide = SplitSide.LEFT,
) -> PixelGrid:
    """Split-view preview of a levels adjustment."""
    return split_preview(
        image,
        lambda img: levels_service.levels_adjust(img, shadow, midtone, highlight),
        split_percentage,
        composition_service=composition_service,
        processed_side=processed_side,
    )
