#!/usr/bin/env python3
"""
Reference image storage.

Reference images are PNG files keyed by (directory, identifier). Every
directory keeps a metadata.json with the hash, size and timestamps of its
images.
"""

import hashlib
import json
import time
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import numpy as np
from PIL import Image

from snapcase.config import SnapshotConfig

__all__ = [
    'ReferenceStore',
]

METADATA_FILE = "metadata.json"


class ReferenceStore:
    """
    Reads and writes reference images.

    File names carry the device scale the same way image assets do,
    e.g. `cell_w375@2x.png`.
    """

    def __init__(self, scale: float = None):
        """
        Initialize reference store.

        Args:
            scale: Device pixels per point (uses config default if None)
        """
        self.scale = scale or SnapshotConfig.SCREEN_SCALE

    def file_name(self, identifier: str) -> str:
        if self.scale > 1:
            return f"{identifier}@{self.scale:g}x.png"
        return f"{identifier}.png"

    def reference_path(self, directory: Path, identifier: str) -> Path:
        """Get path for a reference image."""
        return Path(directory) / self.file_name(identifier)

    def reference_exists(self, directory: Path, identifier: str) -> bool:
        return self.reference_path(directory, identifier).is_file()

    def load_reference(self, directory: Path, identifier: str) -> Image.Image:
        """Load a reference image fully into memory."""
        with Image.open(self.reference_path(directory, identifier)) as image:
            image.load()
            return image.copy()

    def save_reference(self, directory: Path, identifier: str, image: Image.Image) -> Path:
        """
        Save (or overwrite) a reference image.

        Args:
            directory: Reference directory, created if missing
            identifier: Snapshot identifier
            image: Image to save

        Returns:
            Path to saved reference
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        path = self.reference_path(directory, identifier)
        image.save(path)

        metadata = self._load_metadata(directory)
        entry = metadata.get(identifier, {})
        now = time.time()
        entry.setdefault('created', now)
        entry['updated'] = now
        entry['hash'] = self._compute_hash(image)
        entry['size'] = list(image.size)
        metadata[identifier] = entry
        self._save_metadata(directory, metadata)

        return path

    def save_failure_artifacts(
        self,
        diff_dir: Path,
        identifier: str,
        actual: Image.Image,
        diff_image: Optional[Image.Image]
    ) -> Tuple[Path, Optional[Path]]:
        """
        Save the captured image and the visual diff of a failed comparison.

        Returns:
            (actual_path, diff_path) tuple, diff_path is None without a diff image
        """
        diff_dir = Path(diff_dir)
        diff_dir.mkdir(parents=True, exist_ok=True)
        timestamp = int(time.time())

        actual_path = diff_dir / f"{identifier}_actual_{timestamp}.png"
        actual.save(actual_path)

        diff_path = None
        if diff_image is not None:
            diff_path = diff_dir / f"{identifier}_diff_{timestamp}.png"
            diff_image.save(diff_path)

        return actual_path, diff_path

    def _load_metadata(self, directory: Path) -> Dict[str, Any]:
        metadata_file = directory / METADATA_FILE
        if metadata_file.exists():
            try:
                with open(metadata_file, 'r') as f:
                    return json.load(f)
            except (json.JSONDecodeError, IOError):
                return {}
        return {}

    def _save_metadata(self, directory: Path, metadata: Dict[str, Any]) -> None:
        with open(directory / METADATA_FILE, 'w') as f:
            json.dump(metadata, f, indent=2, sort_keys=True)

    def _compute_hash(self, image: Image.Image) -> str:
        """Compute perceptual hash of an image."""
        img = image.convert('L').resize((16, 16), Image.Resampling.LANCZOS)
        pixels = np.array(img).flatten()
        avg = pixels.mean()
        bits = ''.join('1' if p > avg else '0' for p in pixels)
        return hashlib.md5(bits.encode()).hexdigest()[:16]
