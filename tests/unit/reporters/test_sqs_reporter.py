import pytest
import json
import os
from unittest.mock import patch, MagicMock
from botocore.exceptions import ClientError

from tx_router.config.types import Subscription
from tx_router.reporters.sqs import SQSReporter
from tx_router.types.messages import ParsedMessage
from tx_router.types.report import Report
from tx_router.types.reportables import Transaction
from tx_router.utils.exceptions import ConfigurationError, ReporterError


def make_report(memo=""):
    tx = Transaction(
        hash="HASH",
        height="100",
        messages=[ParsedMessage("/cosmos.bank.v1beta1.MsgSend", {"transfer.amount": "5uatom"})],
        memo=memo,
    )
    subscription = Subscription(name="transfers", reporter="queue", chain="cosmos")
    return Report(chain="cosmos", node="https://rpc", reportable=tx, subscription=subscription)


class TestSQSReporter:
    """Test cases for SQS reporter implementation"""

    @pytest.fixture
    def mock_sqs_client(self):
        """Fixture to provide a mock SQS client."""
        mock_client = MagicMock()
        mock_client.send_message.return_value = {"MessageId": "message-1"}
        return mock_client

    @pytest.fixture
    def sqs_instance(self, mock_sqs_client):
        """Fixture to provide an SQSReporter with a mocked client."""
        with patch.dict(os.environ, {}, clear=True):
            sqs = SQSReporter(
                name="queue",
                queue_url="https://test-queue-url",
                region="test-region",
                endpoint_url="https://test-endpoint",
                aws_access_key_id="test-key-id",
                aws_secret_access_key="test-secret-key",
                source="test-source",
            )
            # Set the client directly to the mock for testing
            sqs._client = mock_sqs_client
            return sqs

    @pytest.fixture
    def sqs_env_vars(self):
        """Environment variables for SQS test."""
        env_vars = {
            "SQS_QUEUE_URL": "https://sqs.us-west-2.amazonaws.com/123456789012/test-queue",
            "AWS_REGION": "us-west-2",
            "AWS_ENDPOINT_URL": "https://sqs.us-west-2.amazonaws.com",
            "AWS_ACCESS_KEY_ID": "test-key-id",
            "AWS_SECRET_ACCESS_KEY": "test-secret-key",
        }
        with patch.dict(os.environ, env_vars, clear=True):
            yield env_vars

    def test_init_from_env_vars(self, sqs_env_vars):
        """Test initialization from environment variables."""
        sqs = SQSReporter()

        assert (
            sqs.queue_url
            == "https://sqs.us-west-2.amazonaws.com/123456789012/test-queue"
        )
        assert sqs.region == "us-west-2"
        assert sqs.endpoint_url == "https://sqs.us-west-2.amazonaws.com"
        assert sqs.aws_access_key_id == "test-key-id"
        assert sqs.aws_secret_access_key == "test-secret-key"
        assert sqs.source == "tx_router"
        assert sqs.name() == "sqs"

    @pytest.mark.parametrize(
        "env, missing",
        [
            ({}, "SQS_QUEUE_URL"),
            ({"SQS_QUEUE_URL": "https://q"}, "AWS_REGION"),
            ({"SQS_QUEUE_URL": "https://q", "AWS_REGION": "r"}, "AWS_ENDPOINT_URL"),
            (
                {"SQS_QUEUE_URL": "https://q", "AWS_REGION": "r", "AWS_ENDPOINT_URL": "https://e"},
                "AWS_ACCESS_KEY_ID",
            ),
            (
                {
                    "SQS_QUEUE_URL": "https://q",
                    "AWS_REGION": "r",
                    "AWS_ENDPOINT_URL": "https://e",
                    "AWS_ACCESS_KEY_ID": "k",
                },
                "AWS_SECRET_ACCESS_KEY",
            ),
        ],
    )
    def test_init_with_missing_setting(self, env, missing):
        """Test initialization fails for each missing setting."""
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ConfigurationError) as exc_info:
                SQSReporter()

        assert f"{missing} is required" in str(exc_info.value)

    def test_enabled(self, sqs_instance):
        assert sqs_instance.enabled() is True

    def test_send_report(self, sqs_instance, mock_sqs_client):
        """Test sending one routed report."""
        sqs_instance.send(make_report())

        mock_sqs_client.send_message.assert_called_once()
        kwargs = mock_sqs_client.send_message.call_args.kwargs
        assert kwargs["QueueUrl"] == "https://test-queue-url"

        body = json.loads(kwargs["MessageBody"])
        assert body["chain"] == "cosmos"
        assert body["subscription"] == "transfers"
        assert body["reportable"]["hash"] == "HASH"
        assert body["reportable"]["messages"][0]["type"] == "/cosmos.bank.v1beta1.MsgSend"

        attributes = kwargs["MessageAttributes"]
        assert attributes["source"]["StringValue"] == "test-source"
        assert attributes["chain"]["StringValue"] == "cosmos"
        assert attributes["type"]["StringValue"] == "Transaction"
        assert attributes["subscription"]["StringValue"] == "transfers"

    def test_send_without_subscription_omits_attribute(self, sqs_instance, mock_sqs_client):
        report = make_report()
        report.subscription = None

        sqs_instance.send(report)

        attributes = mock_sqs_client.send_message.call_args.kwargs["MessageAttributes"]
        assert "subscription" not in attributes

    def test_send_client_error(self, sqs_instance, mock_sqs_client):
        """Test that AWS errors are wrapped in ReporterError."""
        mock_sqs_client.send_message.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "SendMessage"
        )

        with pytest.raises(ReporterError) as exc_info:
            sqs_instance.send(make_report())

        assert "Failed to send report to SQS" in str(exc_info.value)

    def test_oversized_report_sent_as_reference(self, sqs_instance, mock_sqs_client):
        """Test that large reports are replaced by a reference."""
        sqs_instance.send(make_report(memo="x" * (SQSReporter.SQS_EFFECTIVE_SIZE_LIMIT + 1)))

        body = json.loads(mock_sqs_client.send_message.call_args.kwargs["MessageBody"])
        assert body == {
            "original_size_exceeded": True,
            "chain": "cosmos",
            "type": "Transaction",
            "hash": "HASH",
        }

    def test_client_created_lazily_once(self):
        """Test the boto3 client is built on first use and then reused."""
        with patch.dict(os.environ, {}, clear=True):
            sqs = SQSReporter(
                queue_url="https://q",
                region="eu-west-1",
                endpoint_url="https://e",
                aws_access_key_id="k",
                aws_secret_access_key="s",
            )

        with patch("tx_router.reporters.sqs.boto3.session.Session") as mock_session:
            sqs.init()
            sqs.init()

        mock_session.assert_called_once_with(
            region_name="eu-west-1", aws_access_key_id="k", aws_secret_access_key="s"
        )
        mock_session.return_value.client.assert_called_once()
        assert mock_session.return_value.client.call_args.args[0] == "sqs"

    def test_close(self, sqs_instance):
        """Test close drops the client."""
        sqs_instance.close()

        assert sqs_instance._client is None
