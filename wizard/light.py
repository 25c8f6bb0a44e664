"""
WiZ light controller
Direct LAN control of a single WiZ bulb without the vendor cloud
"""

import logging
from typing import Mapping, Optional

from pydantic import ValidationError

from .colors import named_color, parse_hex
from .errors import CommunicationError, ConnectError, InvalidInputError
from .models import Configuration, Params
from .protocol import Command, Method, Reply, decode_reply
from .scenes import SCENES, resolve_scene
from .transport import DEFAULT_TIMEOUT, UdpTransport

logger = logging.getLogger(__name__)


class Light:
    """
    Controller for one WiZ bulb

    Keeps a cached Configuration that is refreshed by get_status() and
    updated field by field after every successful setPilot. Not thread
    safe: share one instance per bulb per thread of control.
    """

    def __init__(self, address: str, timeout: float = DEFAULT_TIMEOUT, transport=None):
        """
        Connect to a bulb and fetch its baseline state

        Args:
            address: Bulb IP address or hostname
            timeout: Seconds to wait for each reply
            transport: Object with round_trip(bytes) -> bytes (defaults to UdpTransport)

        Raises:
            ConnectError: If no transport can be created or the initial
                status query fails
        """
        self.address = address
        self.transport = transport if transport is not None else UdpTransport(address, timeout=timeout)

        try:
            self._config = self._query_status("connect")
        except CommunicationError as e:
            self.close()
            raise ConnectError(f"initial status query failed: {e.message}",
                               operation="connect", address=address) from e

        logger.info(f"Connected to WiZ bulb at {address}")

    @property
    def config(self) -> Configuration:
        """Last known bulb state"""
        return self._config

    # ------------------------------------------------------------------
    # Power
    # ------------------------------------------------------------------

    def turn_on(self) -> Configuration:
        return self._apply("on", state=True)

    def turn_off(self) -> Configuration:
        return self._apply("off", state=False)

    def toggle(self) -> Configuration:
        """
        Flip power based on a fresh status query

        The cached state may be stale if another client changed the bulb,
        so this always costs two round trips. An absent power field counts
        as off.
        """
        status = self.get_status()
        if status.power:
            return self.turn_off()
        return self.turn_on()

    # ------------------------------------------------------------------
    # Color and white
    # ------------------------------------------------------------------

    def set_color(self, hex_code: Optional[str] = None, name: Optional[str] = None,
                  red: Optional[int] = None, green: Optional[int] = None,
                  blue: Optional[int] = None) -> Configuration:
        """
        Set an RGB color

        Exactly one form may be given: a hex string, a color name, or any
        subset of red/green/blue. Channels left out of the RGB form are not
        sent, so the bulb keeps its current value for them.

        Raises:
            InvalidInputError: On a malformed hex, an unknown name, no color
                at all, or more than one form
        """
        channels_given = any(c is not None for c in (red, green, blue))
        forms = sum([hex_code is not None, name is not None, channels_given])
        if forms == 0:
            raise InvalidInputError("no color given", operation="color", address=self.address)
        if forms > 1:
            raise InvalidInputError("give only one of hex_code, name or red/green/blue",
                                    operation="color", address=self.address)

        try:
            if hex_code is not None:
                red, green, blue = parse_hex(hex_code)
            elif name is not None:
                red, green, blue = named_color(name)
        except InvalidInputError as e:
            raise e.with_context(operation="color", address=self.address)

        return self._apply("color", r=red, g=green, b=blue)

    def set_brightness(self, percent: int) -> Configuration:
        return self._apply("brightness", dimming=percent)

    def set_color_temperature(self, kelvin: int) -> Configuration:
        return self._apply("temperature", temp=kelvin)

    # ------------------------------------------------------------------
    # Scenes
    # ------------------------------------------------------------------

    def set_speed(self, value: int) -> Configuration:
        """Set dynamic scene speed"""
        return self._apply("speed", speed=value)

    def set_scene(self, scene_id: Optional[int] = None, name: Optional[str] = None) -> Configuration:
        """
        Activate a scene by catalog name or literal id

        A name is used only when it is in the catalog; otherwise the literal
        id is sent.

        Raises:
            InvalidInputError: If neither the name nor an id resolves
        """
        resolved = resolve_scene(scene_id, name)
        if resolved is None:
            message = "no scene given" if name is None else f"unknown scene '{name}'"
            raise InvalidInputError(message, operation="scene", address=self.address)
        if name is not None and resolved != SCENES.get(name):
            logger.warning(f"Scene '{name}' not in catalog, using id {resolved}")
        return self._apply("scene", scene_id=resolved)

    def set_scene_by_name(self, name: str) -> Configuration:
        return self.set_scene(name=name)

    def list_scenes(self) -> Mapping[str, int]:
        return SCENES

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def get_status(self) -> Configuration:
        """Query the bulb and replace the cached state with its answer"""
        self._config = self._query_status("status")
        return self._config

    def close(self):
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _query_status(self, operation: str) -> Configuration:
        reply = self._send(Command(Method.GET_PILOT), operation)
        try:
            return Configuration.from_status_result(reply.result)
        except CommunicationError as e:
            raise e.with_context(operation=operation, address=self.address)

    def _apply(self, operation: str, **values) -> Configuration:
        """Send a setPilot and fold the accepted params into the cache"""
        try:
            params = Params(**values)
        except ValidationError as e:
            details = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                                for err in e.errors())
            raise InvalidInputError(f"invalid parameters: {details}",
                                    operation=operation, address=self.address)
        if params.is_empty():
            raise InvalidInputError("nothing to set", operation=operation, address=self.address)

        logger.info(f"{operation} -> {self.address}: {params.to_wire()}")
        reply = self._send(Command(Method.SET_PILOT, params), operation)

        accepted = params
        if reply.params is not None:
            try:
                accepted = Params.from_wire(reply.params)
            except CommunicationError as e:
                raise e.with_context(operation=operation, address=self.address)

        self._config = self._config.merge(accepted)
        return self._config

    def _send(self, command: Command, operation: str) -> Reply:
        try:
            raw = self.transport.round_trip(command.encode())
            return decode_reply(raw, command.method)
        except CommunicationError as e:
            logger.debug(f"{operation} failed for {self.address}: {e.message}")
            raise e.with_context(operation=operation, address=self.address)
