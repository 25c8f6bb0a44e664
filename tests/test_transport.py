"""
Tests for wizard/transport.py

The socket module is patched; no datagrams leave the machine.
"""

import socket
from unittest.mock import MagicMock, patch

import pytest

from wizard.errors import ConnectError, TransportError, TransportFailure
from wizard.transport import BUFFER_SIZE, WIZ_PORT, UdpTransport


@pytest.fixture
def mock_socket():
    """Patch socket.socket and name resolution in the transport module"""
    sock = MagicMock()
    with patch('wizard.transport.socket.socket', return_value=sock) as factory, \
         patch('wizard.transport.socket.gethostbyname', side_effect=lambda host: host), \
         patch('wizard.transport.select.select', return_value=([], [], [])) as poll:
        sock.factory = factory
        sock.poll = poll
        yield sock


# ============================================================================
# TIER 1 - CRITICAL TESTS: Round trip
# ============================================================================

class TestRoundTrip:
    """Test UdpTransport.round_trip"""

    def test_sends_to_fixed_port(self, mock_socket):
        """Should send one datagram to the bulb on port 38899"""
        mock_socket.recvfrom.return_value = (b'{"method":"getPilot"}', ("10.0.0.5", WIZ_PORT))
        transport = UdpTransport("10.0.0.5")

        data = transport.round_trip(b'{"method":"getPilot"}')

        mock_socket.sendto.assert_called_once_with(b'{"method":"getPilot"}', ("10.0.0.5", 38899))
        mock_socket.recvfrom.assert_called_once_with(BUFFER_SIZE)
        assert data == b'{"method":"getPilot"}'

    def test_binds_ephemeral_port(self, mock_socket):
        """Should bind to no fixed local port"""
        UdpTransport("10.0.0.5")

        mock_socket.factory.assert_called_once_with(socket.AF_INET, socket.SOCK_DGRAM)
        mock_socket.bind.assert_called_once_with(("", 0))

    def test_timeout(self, mock_socket):
        """Should raise TransportError(TIMEOUT) when no reply arrives"""
        mock_socket.recvfrom.side_effect = socket.timeout()
        transport = UdpTransport("10.0.0.5")

        with pytest.raises(TransportError) as exc_info:
            transport.round_trip(b"{}")

        assert exc_info.value.reason == TransportFailure.TIMEOUT
        assert exc_info.value.address == "10.0.0.5"

    def test_receive_timeout_is_bounded(self, mock_socket):
        """Should never wait longer than the configured timeout"""
        mock_socket.recvfrom.return_value = (b"{}", ("10.0.0.5", WIZ_PORT))
        transport = UdpTransport("10.0.0.5", timeout=2.0)

        transport.round_trip(b"{}")

        timeout = mock_socket.settimeout.call_args[0][0]
        assert 0 < timeout <= 2.0

    def test_send_failure(self, mock_socket):
        """Should raise TransportError(SEND_FAILED) on a send error"""
        mock_socket.sendto.side_effect = OSError("Network is unreachable")
        transport = UdpTransport("10.0.0.5")

        with pytest.raises(TransportError) as exc_info:
            transport.round_trip(b"{}")

        assert exc_info.value.reason == TransportFailure.SEND_FAILED
        mock_socket.recvfrom.assert_not_called()

    def test_receive_failure(self, mock_socket):
        """Should raise TransportError(RECEIVE_FAILED) on a receive error"""
        mock_socket.recvfrom.side_effect = ConnectionRefusedError("refused")
        transport = UdpTransport("10.0.0.5")

        with pytest.raises(TransportError) as exc_info:
            transport.round_trip(b"{}")

        assert exc_info.value.reason == TransportFailure.RECEIVE_FAILED

    def test_skips_datagrams_from_other_hosts(self, mock_socket):
        """Should ignore replies that do not come from the bulb"""
        mock_socket.recvfrom.side_effect = [
            (b"stray", ("10.0.0.99", WIZ_PORT)),
            (b"reply", ("10.0.0.5", WIZ_PORT)),
        ]
        transport = UdpTransport("10.0.0.5")

        assert transport.round_trip(b"{}") == b"reply"
        assert mock_socket.recvfrom.call_count == 2

    def test_discards_late_reply_to_earlier_request(self, mock_socket):
        """Should drop a datagram queued before sending instead of returning it"""
        mock_socket.poll.side_effect = [([mock_socket], [], []), ([], [], [])]
        mock_socket.recvfrom.side_effect = [
            (b'{"method":"setPilot","result":{"success":true}}', ("10.0.0.5", WIZ_PORT)),
            (b'{"method":"getPilot","result":{}}', ("10.0.0.5", WIZ_PORT)),
        ]
        transport = UdpTransport("10.0.0.5")

        data = transport.round_trip(b'{"method":"getPilot"}')

        assert data == b'{"method":"getPilot","result":{}}'
        mock_socket.sendto.assert_called_once()
        assert mock_socket.recvfrom.call_count == 2

    def test_late_reply_after_timeout_is_not_reused(self, mock_socket):
        """Should keep the next request in step after a timed-out one"""
        transport = UdpTransport("10.0.0.5")
        mock_socket.recvfrom.side_effect = socket.timeout()
        with pytest.raises(TransportError):
            transport.round_trip(b'{"method":"setPilot","params":{"dimming":20}}')

        # The ack for the timed-out request arrives before the next send
        mock_socket.poll.side_effect = [([mock_socket], [], []), ([], [], [])]
        mock_socket.recvfrom.side_effect = [
            (b'{"method":"setPilot","result":{"success":true}}', ("10.0.0.5", WIZ_PORT)),
            (b'{"method":"getPilot","result":{"state":true}}', ("10.0.0.5", WIZ_PORT)),
        ]

        assert transport.round_trip(b'{"method":"getPilot"}') == b'{"method":"getPilot","result":{"state":true}}'

    def test_pending_socket_error_is_discarded(self, mock_socket):
        """Should not fail a request on an error left over from an earlier send"""
        mock_socket.poll.side_effect = [([mock_socket], [], []), ([], [], [])]
        mock_socket.recvfrom.side_effect = [
            ConnectionRefusedError("refused"),
            (b"reply", ("10.0.0.5", WIZ_PORT)),
        ]
        transport = UdpTransport("10.0.0.5")

        assert transport.round_trip(b"{}") == b"reply"

    def test_closed_transport(self, mock_socket):
        """Should raise SOCKET_UNAVAILABLE after close()"""
        transport = UdpTransport("10.0.0.5")
        transport.close()

        with pytest.raises(TransportError) as exc_info:
            transport.round_trip(b"{}")

        assert exc_info.value.reason == TransportFailure.SOCKET_UNAVAILABLE
        mock_socket.close.assert_called_once()

    def test_context_manager_closes(self, mock_socket):
        """Should close the socket when leaving the with block"""
        with UdpTransport("10.0.0.5"):
            pass

        mock_socket.close.assert_called_once()


# ============================================================================
# TIER 2 - Construction failures
# ============================================================================

class TestConstruction:
    """Test UdpTransport construction errors"""

    def test_unresolvable_address(self):
        """Should raise ConnectError when the name cannot be resolved"""
        with patch('wizard.transport.socket.gethostbyname',
                   side_effect=socket.gaierror("Name or service not known")):
            with pytest.raises(ConnectError) as exc_info:
                UdpTransport("no-such-bulb.invalid")

        assert exc_info.value.address == "no-such-bulb.invalid"

    def test_socket_unavailable(self):
        """Should raise ConnectError when no socket can be created"""
        with patch('wizard.transport.socket.gethostbyname', return_value="10.0.0.5"), \
             patch('wizard.transport.socket.socket', side_effect=OSError("Too many open files")):
            with pytest.raises(ConnectError, match="cannot open UDP socket"):
                UdpTransport("10.0.0.5")
