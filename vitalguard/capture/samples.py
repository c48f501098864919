import math
from dataclasses import dataclass
from typing import Protocol


class SensorUnavailableError(Exception):
    """Sensor-related errors."""


@dataclass(frozen=True)
class AccelerationSample:
    """Tri-axis acceleration in g-units."""

    timestamp: float
    x: float
    y: float
    z: float

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)


@dataclass(frozen=True)
class HeartRateSample:
    timestamp: float
    bpm: float


Sample = AccelerationSample | HeartRateSample


class SampleSink(Protocol):
    def on_sample(self, sample: Sample) -> None: ...


class SampleSource(Protocol):
    @property
    def is_available(self) -> bool: ...

    def start(self, sink: SampleSink) -> None: ...
    def stop(self) -> None: ...
