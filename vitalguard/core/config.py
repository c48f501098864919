import os
import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class SensorConfig:
    sample_interval_sec: float = 0.02


@dataclass
class FallDetectionConfig:
    freefall_threshold: float = 0.35
    impact_threshold: float = 2.8
    detection_window: float = 0.6
    alert_cooldown: float = 30.0


@dataclass
class AlertsConfig:
    vital_cooldown: float = 60.0
    fall_cooldown: float = 30.0
    daily_summary_cooldown: float = 6 * 3600.0
    banner_seconds: float = 4.0
    max_notifications: int | None = None


@dataclass
class ScheduleConfig:
    daily_summary_enabled: bool = True
    daily_summary_hour: int = 8
    daily_summary_minute: int = 0


@dataclass
class AssistantConfig:
    enabled: bool = True
    base_url: str = "https://api.featherless.ai/v1/chat/completions"
    model: str = "meta-llama/Meta-Llama-3.1-8B-Instruct"
    api_key: str = ""
    max_tokens: int = 512
    temperature: float = 0.7
    timeout: float = 30.0


@dataclass
class Config:
    sensor: SensorConfig = field(default_factory=SensorConfig)
    fall_detection: FallDetectionConfig = field(default_factory=FallDetectionConfig)
    alerts: AlertsConfig = field(default_factory=AlertsConfig)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    assistant: AssistantConfig = field(default_factory=AssistantConfig)


def _substitute_env_vars(value: str) -> str:
    pattern = r"\$\{([^}]+)\}"

    def replace(match):
        env_var = match.group(1)
        return os.environ.get(env_var, match.group(0))

    return re.sub(pattern, replace, value)


def _process_config_values(data: dict) -> dict:
    result = {}
    for key, value in data.items():
        if isinstance(value, dict):
            result[key] = _process_config_values(value)
        elif isinstance(value, str):
            result[key] = _substitute_env_vars(value)
        else:
            result[key] = value
    return result


def load_config(config_path: str | Path = "config/settings.yaml") -> Config:
    with open(config_path) as f:
        raw_config = yaml.safe_load(f) or {}

    config_data = _process_config_values(raw_config)

    return Config(
        sensor=SensorConfig(**config_data.get("sensor", {})),
        fall_detection=FallDetectionConfig(**config_data.get("fall_detection", {})),
        alerts=AlertsConfig(**config_data.get("alerts", {})),
        schedule=ScheduleConfig(**config_data.get("schedule", {})),
        assistant=AssistantConfig(**config_data.get("assistant", {})),
    )
