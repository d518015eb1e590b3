"""
Configuration for snapcase snapshot verification.

Configuration can be overridden via environment variables:
    SNAPSHOT_RECORD_MODE: Truthy value forces record mode for every verification
    SNAPSHOT_REFERENCE_DIR: Base path of the reference image directories
    SNAPSHOT_DIFF_DIR: Directory for failure artifacts (actual and diff images)
    SNAPSHOT_SCREEN_WIDTH: Width of the simulated device screen (points)
    SNAPSHOT_SCREEN_HEIGHT: Height of the simulated device screen (points)
    SNAPSHOT_SCREEN_SCALE: Device pixels per point
    SNAPSHOT_CHROME_HEIGHT: Height reserved for status and navigation bars
    SNAPSHOT_DRAIN_BUDGET: Time allowed for draining pending work (seconds)
    SNAPSHOT_TOLERANCE: Default fraction of pixels allowed to differ
"""

import os
import threading
from pathlib import Path
from typing import Callable, Optional, TypeVar

from snapcase.geometry import DeviceMetrics

__all__ = [
    'SnapshotConfig',
    'SnapshotColors',
    'RecordModeOverride',
    'OneTimeGate',
    'is_truthy',
]

T = TypeVar('T')

_TRUTHY = {'1', 'y', 'yes', 't', 'true', 'on'}


def is_truthy(value: Optional[str]) -> bool:
    """Interpret an environment variable value as a boolean."""
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


def _optional_path(name: str) -> Optional[Path]:
    value = os.environ.get(name)
    return Path(value) if value else None


class SnapshotConfig:
    """Centralized snapshot configuration with environment variable overrides."""

    # Paths
    REFERENCE_DIR: Optional[str] = os.environ.get('SNAPSHOT_REFERENCE_DIR') or None
    DIFF_DIR: Optional[Path] = _optional_path('SNAPSHOT_DIFF_DIR')

    # Device profile
    SCREEN_WIDTH: float = float(os.environ.get('SNAPSHOT_SCREEN_WIDTH', '375'))
    SCREEN_HEIGHT: float = float(os.environ.get('SNAPSHOT_SCREEN_HEIGHT', '667'))
    SCREEN_SCALE: float = float(os.environ.get('SNAPSHOT_SCREEN_SCALE', '2'))
    CHROME_HEIGHT: float = float(os.environ.get('SNAPSHOT_CHROME_HEIGHT', '64'))

    # Timing
    DRAIN_BUDGET: float = float(os.environ.get('SNAPSHOT_DRAIN_BUDGET', '0.5'))

    # Thresholds
    # 5% so that small rendering differences between devices of the same class don't break the tests.
    TOLERANCE: float = float(os.environ.get('SNAPSHOT_TOLERANCE', '0.05'))

    # Container decorations
    SAFETY_INSET: float = 10.0
    DASH_LENGTH: float = 2.0
    SKIP_LENGTH: float = 5.0

    @classmethod
    def device_metrics(cls) -> DeviceMetrics:
        """Device metrics of the configured screen."""
        return DeviceMetrics(
            width=cls.SCREEN_WIDTH,
            height=cls.SCREEN_HEIGHT,
            chrome_height=cls.CHROME_HEIGHT,
            scale=cls.SCREEN_SCALE,
        )


class SnapshotColors:
    """Colors used by the snapshot container."""
    WHITE = (255, 255, 255)
    # 0.9 white
    SAFETY_AREA = (230, 230, 230)
    # 0.45 white
    SAFETY_BORDER = (115, 115, 115)
    # Cyan is rarely used for backgrounds and people are used to it from design tools.
    ALIGNMENT_RECT = (0, 255, 255, 128)


class OneTimeGate:
    """
    Computes a value exactly once, even if several threads ask at the same time.

    Usage:
        gate = OneTimeGate(lambda: expensive())
        value = gate.get()
    """

    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._lock = threading.Lock()
        self._done = False
        self._value = None

    def get(self) -> T:
        if self._done:
            return self._value
        with self._lock:
            if not self._done:
                self._value = self._factory()
                self._done = True
        return self._value

    @property
    def is_set(self) -> bool:
        return self._done


class RecordModeOverride:
    """
    Process-wide switch forcing record mode for every verification.

    The environment variable is read only once per process; later changes
    of the environment have no effect.
    """

    ENV_VAR = 'SNAPSHOT_RECORD_MODE'

    _environment_gate = OneTimeGate(
        lambda: RecordModeOverride(is_truthy(os.environ.get(RecordModeOverride.ENV_VAR)))
    )

    def __init__(self, enabled: bool = False):
        self._enabled = bool(enabled)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @classmethod
    def from_environment(cls) -> 'RecordModeOverride':
        return cls._environment_gate.get()

    @classmethod
    def forced(cls) -> 'RecordModeOverride':
        return cls(True)

    def __bool__(self) -> bool:
        return self._enabled

    def __repr__(self) -> str:
        return f"RecordModeOverride(enabled={self._enabled})"
