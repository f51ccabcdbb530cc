from __future__ import annotations

import logging
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dental_chart.services.odontogram.conditions import SurfaceCondition

logger = logging.getLogger("dental_chart.config")


class Settings(BaseSettings):
    chart_notation: Literal["fdi", "universal"] = Field(default="fdi", alias="CHART_NOTATION")
    default_condition: str = Field(default="caries", alias="CHART_DEFAULT_CONDITION")
    history_display_limit: int = Field(default=20, alias="CHART_HISTORY_LIMIT")
    tooth_size: int = Field(default=44, alias="CHART_TOOTH_SIZE")
    tooth_gap: int = Field(default=8, alias="CHART_TOOTH_GAP")
    anatomy_height: int = Field(default=90, alias="CHART_ANATOMY_HEIGHT")
    chart_padding: int = Field(default=30, alias="CHART_PADDING")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator(
        "history_display_limit",
        "tooth_size",
        "tooth_gap",
        "anatomy_height",
        "chart_padding",
        mode="before",
    )
    @classmethod
    def _coerce_empty_ints(cls, value, info):
        if value in {"", None}:
            return cls.model_fields[info.field_name].default
        return value

    @property
    def col_width(self) -> int:
        return self.tooth_size + self.tooth_gap


def validate_settings(settings: Settings) -> None:
    failures: list[str] = []
    warnings: list[str] = []

    if settings.history_display_limit < 1:
        failures.append("CHART_HISTORY_LIMIT must be at least 1")
    if settings.tooth_size < 20:
        failures.append("CHART_TOOTH_SIZE too small (min 20)")
    if settings.anatomy_height < settings.tooth_size:
        warnings.append("CHART_ANATOMY_HEIGHT is smaller than CHART_TOOTH_SIZE; roots will be cramped")

    valid_defaults = {condition.value for condition in SurfaceCondition}
    if settings.default_condition not in valid_defaults:
        warnings.append(
            f"CHART_DEFAULT_CONDITION '{settings.default_condition}' is not a surface condition; using caries"
        )
        settings.default_condition = SurfaceCondition.caries.value

    for warning in warnings:
        logger.warning("Config warning: %s", warning)

    if failures:
        raise RuntimeError("Config validation failed: " + "; ".join(failures))


settings = Settings()
