"""
WiZ UDP/JSON protocol codec
Builds getPilot/setPilot requests and decodes bulb replies
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .errors import ProtocolError, ProtocolFailure
from .models import Params

logger = logging.getLogger(__name__)


class Method(str, Enum):
    """Protocol methods used by the controller"""
    GET_PILOT = "getPilot"
    SET_PILOT = "setPilot"


@dataclass(frozen=True)
class Command:
    """Outgoing request: a method plus an optional parameter set"""
    method: Method
    params: Optional[Params] = None

    def encode(self) -> bytes:
        return encode_command(self)


@dataclass(frozen=True)
class Reply:
    """Decoded bulb reply"""
    method: str
    result: Optional[Dict[str, Any]] = None
    params: Optional[Dict[str, Any]] = None


def encode_command(command: Command) -> bytes:
    """
    Serialize a command to compact UTF-8 JSON

    The `params` key is left out entirely when nothing is set; the bulb
    firmware does not accept `null` or `{}` there for every method.
    """
    payload: Dict[str, Any] = {"method": command.method.value}
    if command.params is not None:
        wire = command.params.to_wire()
        if wire:
            payload["params"] = wire
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")


def decode_reply(data: bytes, expected: Method) -> Reply:
    """
    Decode a bulb reply

    Args:
        data: Raw datagram received from the bulb
        expected: Method of the request this reply answers

    Returns:
        Reply with the echoed method, result and params

    Raises:
        ProtocolError: If the reply is not valid JSON, reports a device
            error, or lacks the fields the request calls for
    """
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ProtocolError(ProtocolFailure.MALFORMED_JSON, f"reply is not valid JSON: {e}")

    if not isinstance(payload, dict):
        raise ProtocolError(ProtocolFailure.MALFORMED_JSON,
                            f"reply is not a JSON object: {type(payload).__name__}")

    error = payload.get("error")
    if error is not None:
        if isinstance(error, dict):
            message = error.get("message", "unknown error")
            code = error.get("code")
            if code is not None:
                message = f"{message} (code {code})"
        else:
            message = str(error)
        raise ProtocolError(ProtocolFailure.DEVICE_ERROR, f"bulb rejected request: {message}")

    method = payload.get("method")
    if method is None:
        raise ProtocolError(ProtocolFailure.MISSING_EXPECTED_FIELD, "reply has no 'method'")
    if method != expected.value:
        raise ProtocolError(ProtocolFailure.UNEXPECTED_METHOD,
                            f"expected reply to {expected.value}, got {method}")

    result = payload.get("result")
    params = payload.get("params")
    if result is not None and not isinstance(result, dict):
        raise ProtocolError(ProtocolFailure.MISSING_EXPECTED_FIELD, "'result' is not an object")
    if params is not None and not isinstance(params, dict):
        raise ProtocolError(ProtocolFailure.MISSING_EXPECTED_FIELD, "'params' is not an object")

    if expected is Method.GET_PILOT:
        if result is None:
            raise ProtocolError(ProtocolFailure.MISSING_EXPECTED_FIELD, "status reply has no 'result'")
    else:
        if result is None and params is None:
            raise ProtocolError(ProtocolFailure.MISSING_EXPECTED_FIELD,
                                "reply has neither 'params' nor 'result'")
        # Firmware acknowledges setPilot with {"success": true}
        if result is not None and result.get("success") is False:
            raise ProtocolError(ProtocolFailure.DEVICE_ERROR, "bulb reported success=false")

    logger.debug("Decoded %s reply: result=%s params=%s", method, result, params)
    return Reply(method=method, result=result, params=params)
