"""
Vital readings

Immutable reading values and the parsing of manually entered text.
Unparseable text is "no reading" and yields None.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class HeartRate:
    bpm: float


@dataclass(frozen=True)
class BloodPressure:
    systolic: int
    diastolic: int


@dataclass(frozen=True)
class Glucose:
    mg_per_dl: float


VitalReading = HeartRate | BloodPressure | Glucose


def _parse_int(text: str | None) -> int | None:
    if not text:
        return None
    try:
        return int(text.strip())
    except ValueError:
        return None


def _parse_float(text: str | None) -> float | None:
    if not text:
        return None
    try:
        value = float(text.strip())
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_blood_pressure(systolic: str | None, diastolic: str | None) -> BloodPressure | None:
    """Both fields must parse as integers, otherwise there is no reading."""
    sys_value = _parse_int(systolic)
    dia_value = _parse_int(diastolic)
    if sys_value is None or dia_value is None:
        return None
    return BloodPressure(systolic=sys_value, diastolic=dia_value)


def parse_glucose(text: str | None) -> Glucose | None:
    value = _parse_float(text)
    if value is None:
        return None
    return Glucose(mg_per_dl=value)


@dataclass
class VitalsSnapshot:
    """Latest known values, as shown to the user and sent in AI prompts"""

    heart_rate: float = 0.0
    steps: int = 0
    oxygen_saturation: float = 0.0
    systolic_text: str = ""
    diastolic_text: str = ""
    glucose_text: str = ""

    @property
    def bp_display(self) -> str:
        if self.systolic_text and self.diastolic_text:
            return f"{self.systolic_text}/{self.diastolic_text} mmHg"
        return "not entered"

    @property
    def glucose_display(self) -> str:
        if self.glucose_text:
            return f"{self.glucose_text} mg/dL"
        return "not entered"

    @property
    def heart_rate_display(self) -> str:
        bpm = int(self.heart_rate)
        return "unavailable" if bpm == 0 else f"{bpm} BPM"

    @property
    def oxygen_display(self) -> str:
        spo2 = int(self.oxygen_saturation)
        return "unavailable" if spo2 == 0 else f"{spo2}%"

    def to_dict(self) -> dict:
        return {
            "heart_rate": self.heart_rate,
            "steps": self.steps,
            "oxygen_saturation": self.oxygen_saturation,
            "blood_pressure": self.bp_display,
            "glucose": self.glucose_display,
        }
