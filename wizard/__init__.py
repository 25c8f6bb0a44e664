"""
WiZard - local LAN control for WiZ Wi-Fi bulbs

Talks to the bulb directly over its UDP/JSON protocol (port 38899),
no vendor cloud involved.

Usage:
    from wizard import Light

    with Light("192.168.1.50") as light:
        light.turn_on()
        light.set_color(hex_code="FF8000")
        print(light.get_status())

Or from the shell:
    wizard 192.168.1.50 status
"""

from .errors import (
    CommunicationError,
    ConnectError,
    InvalidInputError,
    ProtocolError,
    ProtocolFailure,
    TransportError,
    TransportFailure,
    WizardError,
)
from .light import Light
from .models import Configuration, Params
from .scenes import SCENES

__version__ = "0.1.0"
__all__ = [
    "Light",
    "Configuration",
    "Params",
    "SCENES",
    "WizardError",
    "ConnectError",
    "CommunicationError",
    "TransportError",
    "TransportFailure",
    "ProtocolError",
    "ProtocolFailure",
    "InvalidInputError",
]
