from vectormotion.config.schemas import (
    ClipSettings,
    EmitterSettings,
    EngineConfig,
    PlaceholderSettings,
    TransformSettings,
)

__all__ = [
    "ClipSettings",
    "EmitterSettings",
    "EngineConfig",
    "PlaceholderSettings",
    "TransformSettings",
]
