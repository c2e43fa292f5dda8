import pytest
import json
from datetime import datetime, timezone
from tx_router.utils.serializer import Serializer
from tx_router.types.messages import ParsedMessage, UnparsedMessage
from tx_router.types.report import Report
from tx_router.types.reportables import Transaction, TransactionError


@pytest.fixture
def serializer():
    """Fixture to create a Serializer instance for tests."""
    return Serializer()


def test_serialize_simple_dict(serializer):
    """Test serializing a simple dictionary."""
    data = {"key": "value", "number": 123}
    result = serializer.serialize(data)
    assert result == data


def test_serialize_nested_dict(serializer):
    """Test serializing a nested dictionary."""
    data = {"outer": {"inner": "value"}, "array": [1, 2, 3]}
    result = serializer.serialize(data)
    assert result == data


def test_serialize_with_datetime(serializer):
    """Test serializing data with datetime objects."""
    now = datetime.now(timezone.utc)
    data = {"timestamp": now, "value": "test"}

    result = serializer.serialize(data)

    # Datetime should be converted to string
    assert isinstance(result["timestamp"], str)
    assert result["value"] == "test"


def test_serialize_exception_values(serializer):
    """Test that exceptions inside data become strings."""
    result = serializer.serialize({"error": ValueError("boom")})

    assert result == {"error": "boom"}


def test_serialize_report(serializer):
    """Test serializing a routed report through its to_dict."""
    tx = Transaction(
        hash="HASH",
        height="10",
        messages=[
            ParsedMessage("/a.MsgExec", {"k": "v"}, [UnparsedMessage("/b.MsgVote", ValueError("bad"))]),
        ],
    )

    result = serializer.serialize(Report("cosmos", "node", tx))

    assert result["chain"] == "cosmos"
    assert result["subscription"] is None
    nested = result["reportable"]["messages"][0]["messages"][0]
    assert nested == {"type": "/b.MsgVote", "error": "bad"}


def test_serialize_array(serializer):
    """Test serializing an array."""
    data = [1, 2, 3, "test"]
    result = serializer.serialize(data)
    assert result == data


def test_dumps_returns_json_string(serializer):
    """Test dumps produces a JSON document."""
    body = serializer.dumps(Report("cosmos", "node", TransactionError(RuntimeError("x"))))

    assert json.loads(body)["reportable"] == {"type": "TransactionError", "error": "x"}
