"""Alert titles and messages shown to the user."""

from vitalguard.analysis.vitals import BloodPressure, Glucose, HeartRate
from vitalguard.analysis.vitals_classifier import VitalBand
from vitalguard.events.observer import FallEvent

HEALTHY_STEPS = 7500
LOW_STEPS = 3000


def heart_rate_message(reading: HeartRate, band: VitalBand) -> tuple[str, str]:
    bpm = int(reading.bpm)
    match band:
        case VitalBand.HIGH:
            return (
                "High Heart Rate Detected",
                f"Your heart rate is currently {bpm} BPM. Please sit down and rest. "
                "If you feel chest pain or shortness of breath, contact emergency "
                "services immediately.",
            )
        case VitalBand.LOW:
            return (
                "Low Heart Rate Detected",
                f"Your heart rate is {bpm} BPM, which is below the normal resting range. "
                "If you feel dizzy or faint, seek medical attention.",
            )
    return (
        "Elevated Heart Rate",
        f"Your heart rate is {bpm} BPM, slightly above the normal resting range. "
        "Take a moment to breathe slowly and relax.",
    )


def blood_pressure_message(reading: BloodPressure, band: VitalBand) -> tuple[str, str]:
    bp = f"{reading.systolic}/{reading.diastolic}"
    match band:
        case VitalBand.CRISIS:
            return (
                "Hypertensive Crisis",
                f"BP {bp} mmHg is dangerously high. Seek emergency medical care immediately.",
            )
        case VitalBand.STAGE_2:
            return (
                "High Blood Pressure (Stage 2)",
                f"Your BP is {bp} mmHg. This is Stage 2 Hypertension. "
                "Contact your doctor as soon as possible.",
            )
    return (
        "High Blood Pressure (Stage 1)",
        f"Your BP is {bp} mmHg. Consider reducing sodium intake, exercising regularly, "
        "and consulting your doctor.",
    )


def glucose_message(reading: Glucose, band: VitalBand) -> tuple[str, str]:
    value = int(reading.mg_per_dl)
    match band:
        case VitalBand.CRISIS:
            return (
                "Critically High Blood Sugar",
                f"Your glucose is {value} mg/dL. This level is dangerously high. "
                "Contact your healthcare provider immediately.",
            )
        case VitalBand.LOW:
            return (
                "Low Blood Sugar",
                f"Your glucose is {value} mg/dL, which is below the healthy range. "
                "Consume fast-acting carbohydrates immediately.",
            )
    return (
        "High Blood Sugar",
        f"Your glucose is {value} mg/dL, above the normal fasting range. "
        "Consider reducing sugar intake and staying hydrated.",
    )


def fall_message(event: FallEvent) -> tuple[str, str]:
    return (
        "Potential Fall Detected",
        "A sudden fall-like motion was detected. Are you okay? If you need help, "
        "notify an emergency contact or call for assistance.",
    )


def daily_summary_message(heart_rate: float, steps: int) -> tuple[str, str]:
    title = "Daily Health Insights"
    heart_rate_healthy = 60 <= heart_rate <= 100
    if heart_rate_healthy and steps >= HEALTHY_STEPS:
        return (
            title,
            "Great job! Your heart rate stayed within the healthy range and you've "
            f"logged {steps} steps today. Keep it up!",
        )
    if 0 < steps < LOW_STEPS:
        return (
            title,
            f"You've taken {steps} steps today. Try to reach {HEALTHY_STEPS:,} steps for "
            "optimal cardiovascular health. A short walk can make a big difference!",
        )
    return (
        title,
        "Your health data has been recorded for today. Keep monitoring your vitals "
        "and stay active for best results.",
    )
