#!/usr/bin/env python3
"""
Pixel comparison of captured images against reference images.
"""

from pathlib import Path
from typing import Optional, Tuple

import numpy as np
from PIL import Image, ImageChops

__all__ = [
    'ComparisonResult',
    'ImageComparator',
]


class ComparisonResult:
    """Result of comparing an image against its reference."""

    def __init__(
        self,
        passed: bool,
        diff_fraction: float,
        diff_pixels: int,
        total_pixels: int,
        diff_image: Optional[Image.Image] = None,
        message: str = ""
    ):
        self.passed = passed
        self.diff_fraction = diff_fraction
        self.diff_pixels = diff_pixels
        self.total_pixels = total_pixels
        self.diff_image = diff_image
        self.message = message
        # Filled in when failure artifacts are saved.
        self.actual_path: Optional[Path] = None
        self.diff_path: Optional[Path] = None

    @property
    def diff_percentage(self) -> float:
        return self.diff_fraction * 100

    def __bool__(self) -> bool:
        return self.passed

    def __repr__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return f"ComparisonResult({status}, diff={self.diff_percentage:.2f}%)"


class ImageComparator:
    """
    Tolerant image comparison.

    The tolerance passed to compare() is the fraction of pixels (0.0-1.0)
    allowed to differ.
    """

    def _preprocess_image(self, image: Image.Image) -> Image.Image:
        """Alpha and palette modes are compared as RGB."""
        if image.mode != 'RGB':
            image = image.convert('RGB')
        return image

    def compute_diff(
        self,
        reference: Image.Image,
        actual: Image.Image
    ) -> Tuple[Image.Image, int, int]:
        """
        Compute difference between two images of the same size.

        Returns:
            Tuple of (diff_image, diff_pixels, total_pixels)
        """
        reference = self._preprocess_image(reference)
        actual = self._preprocess_image(actual)

        diff = ImageChops.difference(reference, actual)
        diff_array = np.array(diff)
        diff_mask = np.any(diff_array > 0, axis=2)

        diff_pixels = int(np.sum(diff_mask))
        total_pixels = reference.size[0] * reference.size[1]

        # Reference faded with differences highlighted in red
        faded_reference = Image.blend(
            reference,
            Image.new('RGB', reference.size, (128, 128, 128)),
            0.5
        )
        highlight = np.zeros((*reference.size[::-1], 3), dtype=np.uint8)
        highlight[diff_mask] = [255, 0, 0]
        diff_visual = Image.blend(faded_reference, Image.fromarray(highlight), 0.5)

        return diff_visual, diff_pixels, total_pixels

    def compare(
        self,
        reference: Image.Image,
        actual: Image.Image,
        tolerance: float
    ) -> ComparisonResult:
        """
        Compare a captured image against a reference image.

        Args:
            reference: Reference image recorded earlier
            actual: Image captured now
            tolerance: Fraction of pixels (0.0-1.0) allowed to differ

        Returns:
            ComparisonResult with comparison details
        """
        if reference.size != actual.size:
            total = actual.size[0] * actual.size[1]
            return ComparisonResult(
                passed=False,
                diff_fraction=1.0,
                diff_pixels=total,
                total_pixels=total,
                message=(
                    f"Images have different sizes: reference {reference.size[0]}x{reference.size[1]}, "
                    f"actual {actual.size[0]}x{actual.size[1]}"
                )
            )

        diff_image, diff_pixels, total_pixels = self.compute_diff(reference, actual)
        diff_fraction = diff_pixels / total_pixels if total_pixels > 0 else 0.0
        passed = diff_fraction <= tolerance

        message = f"Diff: {diff_fraction * 100:.2f}% ({diff_pixels}/{total_pixels} pixels)"
        if not passed:
            message += f" - exceeds tolerance of {tolerance * 100:g}%"

        return ComparisonResult(
            passed=passed,
            diff_fraction=diff_fraction,
            diff_pixels=diff_pixels,
            total_pixels=total_pixels,
            diff_image=diff_image,
            message=message
        )
