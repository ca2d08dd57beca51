"""Exceptions raised by the instancing pipeline."""


class InstancingError(Exception):
    """Base class for template-to-instance failures."""


class PlaceholderResolutionError(InstancingError):
    """A placeholder tag could not be turned into concrete values for a target."""

    def __init__(self, tag, element_id, reason):
        self.tag = tag
        self.element_id = element_id
        self.reason = reason
        super().__init__(f"{tag} on {element_id}: {reason}")


class MeasurementError(InstancingError):
    """Geometry measurement failed (empty or degenerate path)."""


class ContentParseError(InstancingError):
    """Clip content markup could not be parsed into the content tree."""
