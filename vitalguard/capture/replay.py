import dataclasses
import logging
import time
from collections.abc import Iterable
from pathlib import Path

import numpy as np

from vitalguard.capture.samples import (
    AccelerationSample,
    Sample,
    SampleSink,
    SensorUnavailableError,
)

logger = logging.getLogger(__name__)


def load_acceleration_trace(path: str | Path) -> list[AccelerationSample]:
    """Load a recorded accelerometer trace.

    The file is CSV with a header row and columns ``t,x,y,z``; ``t`` is in
    seconds and the axes are in g-units.

    Raises:
        SensorUnavailableError: the file does not exist
        ValueError: the file does not have four columns
    """
    path = Path(path)
    if not path.exists():
        raise SensorUnavailableError(f"Trace file not found: {path}")

    data = np.atleast_2d(np.loadtxt(path, delimiter=",", skiprows=1, dtype=np.float64))
    if data.size == 0:
        return []
    if data.shape[1] != 4:
        raise ValueError(f"Expected columns t,x,y,z in {path}, got {data.shape[1]} columns")

    return [
        AccelerationSample(timestamp=float(t), x=float(x), y=float(y), z=float(z))
        for t, x, y, z in data
    ]


class ReplaySource:
    """Feeds pre-recorded samples to a sink in timestamp order.

    ``start`` runs to completion on the caller's thread. With ``realtime``
    enabled the gaps between sample timestamps are slept through. With
    ``start_at`` set, every timestamp is shifted so the first sample lands
    on that instant, keeping the relative spacing.
    """

    def __init__(
        self,
        samples: Iterable[Sample],
        realtime: bool = False,
        start_at: float | None = None,
    ):
        self.samples = sorted(samples, key=lambda s: s.timestamp)
        if start_at is not None and self.samples:
            offset = start_at - self.samples[0].timestamp
            self.samples = [
                dataclasses.replace(s, timestamp=s.timestamp + offset) for s in self.samples
            ]
        self.realtime = realtime
        self._running = False

    @property
    def is_available(self) -> bool:
        return True

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self, sink: SampleSink) -> None:
        self._running = True
        logger.info(f"Replaying {len(self.samples)} samples")

        previous: float | None = None
        for sample in self.samples:
            if not self._running:
                break
            if self.realtime and previous is not None:
                time.sleep(max(0.0, sample.timestamp - previous))
            previous = sample.timestamp
            sink.on_sample(sample)

        self._running = False

    def stop(self) -> None:
        self._running = False
