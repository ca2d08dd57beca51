from __future__ import annotations

from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

ClipUnits = Literal["userSpaceOnUse", "objectBoundingBox"]


class TransformSettings(BaseModel):
    # Decimal places for centered-scale translate companions; None disables rounding.
    translate_precision: Optional[int] = Field(0, ge=0, le=6)

    model_config = ConfigDict(extra="allow")


class PlaceholderSettings(BaseModel):
    default_stroke_width: float = Field(1.0, ge=0)
    default_letter_spacing: float = 0.0
    default_font_size: float = Field(18.0, gt=0)
    stroke_width_factor: float = Field(3.0, gt=0)
    letter_spacing_boost: float = 8.0
    font_size_factor: float = Field(1.4, gt=0)
    wave_amplitude_deg: float = Field(15.0, ge=0, le=180)
    wave_progress_range: Tuple[float, float] = (0.1, 0.9)

    model_config = ConfigDict(extra="allow")

    @field_validator("wave_progress_range")
    @classmethod
    def validate_progress_range(cls, v):
        lo, hi = v
        if not (0.0 <= lo < hi <= 1.0):
            raise ValueError("wave_progress_range must satisfy 0 <= lo < hi <= 1")
        return v


class ClipSettings(BaseModel):
    reveal_padding_px: float = Field(10.0, ge=0)
    default_units: ClipUnits = "userSpaceOnUse"

    model_config = ConfigDict(extra="allow")


class EmitterSettings(BaseModel):
    # Used for tracks authored without a begin value
    default_begin: str = "0s"

    model_config = ConfigDict(extra="allow")


class EngineConfig(BaseModel):
    transforms: TransformSettings = Field(default_factory=TransformSettings)
    placeholders: PlaceholderSettings = Field(default_factory=PlaceholderSettings)
    clips: ClipSettings = Field(default_factory=ClipSettings)
    emitter: EmitterSettings = Field(default_factory=EmitterSettings)
    log_level: str = "INFO"

    model_config = ConfigDict(extra="allow")
