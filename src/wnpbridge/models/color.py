"""Color model for pixel state."""

import colorsys

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Color(BaseModel):
    """Standard 8-bit RGB color model.

    Uses standard 8-bit RGB (0-255) as the application's color representation.
    The packed 32-bit wire format is handled by `wnpbridge.codec`; HSV is the
    representation the accessory characteristics speak.

    The model is frozen so strip states can be compared and hashed.
    """

    model_config = ConfigDict(frozen=True)

    r: int = Field(ge=0, le=255, description="Red (0-255)")
    g: int = Field(ge=0, le=255, description="Green (0-255)")
    b: int = Field(ge=0, le=255, description="Blue (0-255)")

    @field_validator("r", "g", "b")
    @classmethod
    def validate_rgb(cls, v: int) -> int:
        """Ensure RGB values are in valid range."""
        if not 0 <= v <= 255:
            raise ValueError("RGB values must be between 0 and 255")
        return v

    @classmethod
    def off(cls) -> "Color":
        """Create off (black) color."""
        return cls(r=0, g=0, b=0)

    @classmethod
    def red(cls) -> "Color":
        """Create solid red, the default on-color of a strip that starts dark."""
        return cls(r=255, g=0, b=0)

    @classmethod
    def from_hsv(cls, h: float, s: float, v: float) -> "Color":
        """Create a color from hue/saturation/value.

        Args:
            h: Hue in degrees; wraps modulo 360
            s: Saturation (0.0-1.0)
            v: Value / brightness (0.0-1.0)

        Example:
            >>> Color.from_hsv(120, 1.0, 1.0)
            Color(r=0, g=255, b=0)
        """
        if not 0.0 <= s <= 1.0:
            raise ValueError(f"Saturation must be between 0 and 1, got {s}")
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"Value must be between 0 and 1, got {v}")

        r, g, b = colorsys.hsv_to_rgb((h % 360) / 360.0, s, v)
        return cls(r=_quantize(r), g=_quantize(g), b=_quantize(b))

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """Parse a 'RRGGBB' hex string (leading '#' optional).

        Raises:
            ValueError: If the string is not six hex digits
        """
        s = value.strip().removeprefix("#")
        if len(s) != 6:
            raise ValueError(f"{value!r} is not a valid RGB hex colour")
        try:
            packed = int(s, 16)
        except ValueError:
            raise ValueError(f"{value!r} is not a valid RGB hex colour") from None
        return cls(r=(packed >> 16) & 0xFF, g=(packed >> 8) & 0xFF, b=packed & 0xFF)

    @property
    def is_black(self) -> bool:
        """True when every channel is zero."""
        return self.r == 0 and self.g == 0 and self.b == 0

    def to_hsv(self) -> tuple[float, float, float]:
        """Convert to (hue degrees, saturation 0-1, value 0-1)."""
        h, s, v = colorsys.rgb_to_hsv(self.r / 255.0, self.g / 255.0, self.b / 255.0)
        return (h * 360.0, s, v)

    def rgba16(self) -> tuple[int, int, int, int]:
        """Return channels scaled to 16 bits (0-65535), alpha fully opaque.

        Scaling by 257 maps 0xAB to 0xABAB, so shifting right by 8 recovers
        the original byte exactly.
        """
        return (self.r * 257, self.g * 257, self.b * 257, 0xFFFF)

    def to_rgb_tuple(self) -> tuple[int, int, int]:
        """Convert to RGB tuple."""
        return (self.r, self.g, self.b)

    def to_hex(self) -> str:
        """Convert to CSS hex color string (e.g., '#FF0000').

        Example:
            >>> Color(r=255, g=0, b=0).to_hex()
            '#FF0000'
        """
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


def _quantize(channel: float) -> int:
    return min(255, max(0, int(channel * 255.0 + 0.5)))
