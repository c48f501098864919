"""
Vitals threshold classification

Maps a vital reading to a severity band using clinical cutoffs. Rules are
evaluated top to bottom and the first match wins.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum

from vitalguard.analysis.vitals import BloodPressure, Glucose, HeartRate, VitalReading


class Severity(IntEnum):
    NORMAL = 0
    ELEVATED = 1
    WARNING = 2
    CRITICAL = 3

    @property
    def label(self) -> str:
        return self.name.lower()


class VitalBand(Enum):
    NORMAL = "normal"
    ELEVATED = "elevated"
    HIGH = "high"
    LOW = "low"
    STAGE_1 = "stage_1"
    STAGE_2 = "stage_2"
    CRISIS = "crisis"


@dataclass(frozen=True)
class Assessment:
    severity: Severity
    band: VitalBand


def _assess_heart_rate(bpm: float) -> Assessment:
    if bpm > 120:
        return Assessment(Severity.CRITICAL, VitalBand.HIGH)
    if 100 <= bpm <= 120:
        return Assessment(Severity.WARNING, VitalBand.ELEVATED)
    if bpm < 50:
        return Assessment(Severity.WARNING, VitalBand.LOW)
    return Assessment(Severity.NORMAL, VitalBand.NORMAL)


def _assess_blood_pressure(systolic: int, diastolic: int) -> Assessment:
    if systolic > 180 or diastolic > 120:
        return Assessment(Severity.CRITICAL, VitalBand.CRISIS)
    if systolic >= 140 or diastolic >= 90:
        return Assessment(Severity.WARNING, VitalBand.STAGE_2)
    if 130 <= systolic <= 139 or 81 <= diastolic <= 89:
        return Assessment(Severity.WARNING, VitalBand.STAGE_1)
    if 120 <= systolic <= 129:
        return Assessment(Severity.ELEVATED, VitalBand.ELEVATED)
    return Assessment(Severity.NORMAL, VitalBand.NORMAL)


def _assess_glucose(mg_per_dl: float) -> Assessment:
    if mg_per_dl > 250:
        return Assessment(Severity.CRITICAL, VitalBand.CRISIS)
    if mg_per_dl > 125:
        return Assessment(Severity.WARNING, VitalBand.HIGH)
    if mg_per_dl < 70:
        return Assessment(Severity.CRITICAL, VitalBand.LOW)
    return Assessment(Severity.NORMAL, VitalBand.NORMAL)


def assess(reading: VitalReading) -> Assessment:
    match reading:
        case HeartRate(bpm=bpm):
            return _assess_heart_rate(bpm)
        case BloodPressure(systolic=systolic, diastolic=diastolic):
            return _assess_blood_pressure(systolic, diastolic)
        case Glucose(mg_per_dl=mg_per_dl):
            return _assess_glucose(mg_per_dl)
    raise TypeError(f"Unsupported reading: {reading!r}")


def classify(reading: VitalReading) -> Severity:
    return assess(reading).severity
