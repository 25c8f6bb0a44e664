"""
UDP transport for WiZ bulbs
One datagram out, one datagram back, bounded by a timeout
"""

import logging
import select
import socket
import time
from typing import Optional

from .errors import ConnectError, TransportError, TransportFailure

logger = logging.getLogger(__name__)

# WiZ bulb communication constants
WIZ_PORT = 38899  # fixed by the firmware, not configurable
DEFAULT_TIMEOUT = 2.0  # seconds to wait for a reply
BUFFER_SIZE = 4096


class UdpTransport:
    """Request/response UDP channel to a single bulb"""

    def __init__(self, address: str, timeout: float = DEFAULT_TIMEOUT):
        """
        Resolve the bulb address and open an ephemeral UDP socket

        Args:
            address: Bulb IP address or hostname
            timeout: Seconds to wait for each reply

        Raises:
            ConnectError: If the address cannot be resolved or no socket
                can be created
        """
        self.address = address
        self.timeout = timeout

        try:
            self.host = socket.gethostbyname(address)
        except (socket.gaierror, UnicodeError) as e:
            raise ConnectError(f"cannot resolve address: {e}", operation="connect", address=address)

        try:
            self._sock: Optional[socket.socket] = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            # Ephemeral port so the reply lands on this socket
            self._sock.bind(("", 0))
        except OSError as e:
            raise ConnectError(f"cannot open UDP socket: {e}", operation="connect", address=address)

        logger.debug(f"UDP transport ready for {address} ({self.host}:{WIZ_PORT})")

    def round_trip(self, payload: bytes) -> bytes:
        """
        Send one datagram to the bulb and wait for its reply

        Datagrams already queued on the socket are discarded before sending,
        so a late reply to an earlier request is never taken for this one.
        Datagrams from other senders are skipped; the deadline is measured
        on the monotonic clock so skipped datagrams do not extend it.

        Args:
            payload: Encoded request

        Returns:
            Reply datagram, verbatim

        Raises:
            TransportError: On a closed socket, send failure, receive
                failure or timeout
        """
        if self._sock is None:
            raise TransportError(TransportFailure.SOCKET_UNAVAILABLE, "transport is closed",
                                 address=self.address)

        self._discard_pending()

        logger.debug(f"-> {self.host}:{WIZ_PORT} {payload!r}")
        try:
            self._sock.sendto(payload, (self.host, WIZ_PORT))
        except OSError as e:
            raise TransportError(TransportFailure.SEND_FAILED, f"failed to send datagram: {e}",
                                 address=self.address)

        deadline = time.monotonic() + self.timeout
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise self._timeout_error()
            self._sock.settimeout(remaining)
            try:
                data, sender = self._sock.recvfrom(BUFFER_SIZE)
            except socket.timeout:
                raise self._timeout_error()
            except OSError as e:
                raise TransportError(TransportFailure.RECEIVE_FAILED, f"failed to receive reply: {e}",
                                     address=self.address)

            if sender[0] != self.host:
                logger.debug(f"Ignoring datagram from {sender[0]}")
                continue

            logger.debug(f"<- {sender[0]}:{sender[1]} {data!r}")
            return data

    def _discard_pending(self):
        """Drop datagrams that arrived after an earlier request gave up waiting"""
        while select.select([self._sock], [], [], 0)[0]:
            try:
                data, sender = self._sock.recvfrom(BUFFER_SIZE)
            except OSError as e:
                # A late ICMP error from an earlier send surfaces here
                logger.debug(f"Discarded pending socket error: {e}")
                continue
            logger.debug(f"Discarded stale datagram from {sender[0]}: {data!r}")

    def _timeout_error(self) -> TransportError:
        return TransportError(TransportFailure.TIMEOUT,
                              f"no reply within {self.timeout:g}s",
                              address=self.address)

    def close(self):
        """Close the socket; further round trips fail"""
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
