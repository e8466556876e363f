"""Tests de PlaintextGraphiteClient (socket simulado)."""

from unittest.mock import MagicMock, patch

import pytest

from graphite_reporter.domain.models import GraphiteMetric
from graphite_reporter.errors import GraphiteClientError
from graphite_reporter.reporter.graphite_client import PlaintextGraphiteClient


CREATE_CONNECTION = "graphite_reporter.reporter.graphite_client.socket.create_connection"

METRICS = [
    GraphiteMetric("test.org1.space1.app1.0", "2", 1520259517),
    GraphiteMetric("test.org2.space2.app2.0", "3", 1520259517),
]


@pytest.fixture
def sock():
    return MagicMock()


class TestPlaintextGraphiteClient:

    def test_metric_line(self):
        assert METRICS[0].to_line() == "test.org1.space1.app1.0 2 1520259517\n"

    def test_connect_send_disconnect(self, sock):
        client = PlaintextGraphiteClient("graphite.local", 2003, timeout=3.0)

        with patch(CREATE_CONNECTION, return_value=sock) as create:
            client.connect()
            client.send_metrics(METRICS)
            client.disconnect()

        create.assert_called_once_with(("graphite.local", 2003), timeout=3.0)
        sock.sendall.assert_called_once_with(
            b"test.org1.space1.app1.0 2 1520259517\n"
            b"test.org2.space2.app2.0 3 1520259517\n"
        )
        sock.close.assert_called_once()
        assert not client.is_connected

    def test_send_without_connection(self):
        client = PlaintextGraphiteClient("graphite.local", 2003)

        with pytest.raises(GraphiteClientError, match="not connected"):
            client.send_metrics(METRICS)

    def test_connect_failure(self):
        client = PlaintextGraphiteClient("graphite.local", 2003)

        with patch(CREATE_CONNECTION, side_effect=ConnectionRefusedError("refused")):
            with pytest.raises(GraphiteClientError):
                client.connect()
        assert not client.is_connected

    def test_send_failure(self, sock):
        sock.sendall.side_effect = BrokenPipeError("pipe")
        client = PlaintextGraphiteClient("graphite.local", 2003)

        with patch(CREATE_CONNECTION, return_value=sock):
            client.connect()
        with pytest.raises(GraphiteClientError):
            client.send_metrics(METRICS)

    def test_empty_batch_sends_nothing(self, sock):
        client = PlaintextGraphiteClient("graphite.local", 2003)

        with patch(CREATE_CONNECTION, return_value=sock):
            client.connect()
        client.send_metrics([])

        sock.sendall.assert_not_called()

    def test_disconnect_without_connection_is_noop(self):
        PlaintextGraphiteClient("graphite.local", 2003).disconnect()

    def test_close_failure(self, sock):
        sock.close.side_effect = OSError("bad fd")
        client = PlaintextGraphiteClient("graphite.local", 2003)

        with patch(CREATE_CONNECTION, return_value=sock):
            client.connect()
        with pytest.raises(GraphiteClientError):
            client.disconnect()
        assert not client.is_connected
