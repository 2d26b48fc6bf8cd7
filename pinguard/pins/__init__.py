"""Pins — physical pin identity and format conversion."""

from .models import Pin, Port, PORT_SIZES
from .normalize import normalize, to_display_string, to_register_name, all_pins

__all__ = [
    # Models
    "Pin", "Port", "PORT_SIZES",
    # Normalization
    "normalize", "to_display_string", "to_register_name", "all_pins",
]
