"""
Shared pytest fixtures for WiZard tests
"""

import json

import pytest

from wizard.errors import TransportError, TransportFailure
from wizard.light import Light


class FakeTransport:
    """
    Stand-in for UdpTransport

    Replies are consumed in order; an exception instance in the queue is
    raised instead of returned. Every payload sent is recorded.
    """

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.sent = []
        self.closed = False

    def queue(self, *replies):
        self.replies.extend(replies)

    def round_trip(self, payload: bytes) -> bytes:
        self.sent.append(json.loads(payload.decode("utf-8")))
        if not self.replies:
            raise TransportError(TransportFailure.TIMEOUT, "no reply within 2s")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            return json.dumps(reply).encode("utf-8")
        return reply

    def close(self):
        self.closed = True


def status_reply(**result):
    return {"method": "getPilot", "env": "pro", "result": result}


def ack_reply():
    return {"method": "setPilot", "env": "pro", "result": {"success": True}}


@pytest.fixture
def sample_status():
    """Status of a bulb in RGB mode"""
    return {
        "mac": "a8bb50aabbcc",
        "rssi": -61,
        "src": "",
        "state": True,
        "r": 255,
        "g": 0,
        "b": 0,
        "dimming": 80
    }


@pytest.fixture
def transport(sample_status):
    """Fake transport primed with the initial status reply"""
    return FakeTransport([status_reply(**sample_status)])


@pytest.fixture
def light(transport):
    """Light connected to the fake transport, initial query already consumed"""
    return Light("192.168.1.100", transport=transport)
