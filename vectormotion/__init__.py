"""vectormotion: template-to-instance SVG animation and clip engine."""

__version__ = "0.1.0"
