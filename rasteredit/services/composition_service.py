from __future__ import annotations

from typing import Callable, Dict
import logging
import os

import numpy as np
from dotenv import load_dotenv

from ..models.operations import MaskOperation, SplitSide
from ..models.pixel_grid import PixelGrid
from .image_service import require_grid
from .transform_service import TransformService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class CompositionService:
    """
    Mask-gated editing and before/after split views.
    """

    def __init__(self,
                 transform_service: TransformService | None = None,
                 mask_tolerance: int = None):
        """
        Args:
            transform_service: Provides the operations a mask can gate
            mask_tolerance: A mask pixel is selected when every channel is
                below this value (defaults to env var)
        """
        self.transforms = transform_service or TransformService()
        self.mask_tolerance = (mask_tolerance if mask_tolerance is not None
                               else int(os.getenv("MASK_BLACK_TOLERANCE", "10")))

        self._operations: Dict[MaskOperation, Callable[[PixelGrid], PixelGrid]] = {
            MaskOperation.BLUR: self.transforms.blur,
            MaskOperation.SHARPEN: self.transforms.sharpen,
            MaskOperation.SEPIA: self.transforms.to_sepia,
            MaskOperation.GREYSCALE: self.transforms.to_greyscale,
            MaskOperation.RED_COMPONENT: self.transforms.visualize_red_component,
            MaskOperation.GREEN_COMPONENT: self.transforms.visualize_green_component,
            MaskOperation.BLUE_COMPONENT: self.transforms.visualize_blue_component,
            MaskOperation.VALUE_COMPONENT: self.transforms.visualize_value,
            MaskOperation.INTENSITY_COMPONENT: self.transforms.visualize_intensity,
            MaskOperation.LUMA_COMPONENT: self.transforms.visualize_luma,
        }
        logger.info(f"CompositionService initialized with mask tolerance {self.mask_tolerance}")

    def get_operation(self, operation: MaskOperation | str) -> Callable[[PixelGrid], PixelGrid]:
        """Transform bound to a mask operation or its command name."""
        return self._operations[MaskOperation.parse(operation)]

    def selection(self, mask: PixelGrid) -> np.ndarray:
        """Boolean (H, W) array, True where the mask pixel is near-black."""
        require_grid(mask, "mask")
        return np.all(mask.pixels < self.mask_tolerance, axis=2)

    def apply_with_mask(self,
                        source: PixelGrid,
                        mask: PixelGrid,
                        operation: MaskOperation | str) -> PixelGrid:
        """
        Apply `operation` only where `mask` is near-black.

        Args:
            source: Image to edit.
            mask: Same-sized grid; near-black pixels mark the edited region.
            operation: A MaskOperation or its command name, e.g. "blur".

        Returns:
            PixelGrid: processed pixels inside the selection, source pixels elsewhere.
        """
        require_grid(source, "source")
        require_grid(mask, "mask")
        if not source.same_size(mask):
            raise ValueError(
                f"Source image and mask image dimensions must match: "
                f"{source.width}x{source.height} vs {mask.width}x{mask.height}"
            )
        op = MaskOperation.parse(operation)
        processed = self.get_operation(op)(source)

        selected = self.selection(mask)[:, :, np.newaxis]
        logger.debug(f"Masked {op.value}: {int(selected.sum())} of "
                     f"{source.width * source.height} pixels selected")
        return PixelGrid(np.where(selected, processed.pixels, source.pixels))

    def apply_split_view(self,
                         original: PixelGrid,
                         processed: PixelGrid,
                         split_percentage: float,
                         processed_side: SplitSide = SplitSide.LEFT) -> PixelGrid:
        """
        Side-by-side before/after view.

        The processed image fills floor(width * split_percentage / 100)
        columns on `processed_side`; the original fills the rest. At 0 the
        result is `original`, at 100 it is `processed`, whichever the side.
        """
        require_grid(original, "original")
        require_grid(processed, "processed")
        if not original.same_size(processed):
            raise ValueError(
                f"Original and processed dimensions must match: "
                f"{original.width}x{original.height} vs {processed.width}x{processed.height}"
            )
        if split_percentage is None or not 0 <= split_percentage <= 100:
            raise ValueError(f"Split percentage must be between 0 and 100, got {split_percentage}")
        side = SplitSide(processed_side)

        width = original.width
        split_x = int(width * split_percentage // 100)

        out = original.pixels.copy()
        if side is SplitSide.LEFT:
            out[:, :split_x] = processed.pixels[:, :split_x]
        else:
            out[:, width - split_x:] = processed.pixels[:, width - split_x:]
        return PixelGrid(out)
