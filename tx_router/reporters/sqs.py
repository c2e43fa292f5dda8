from typing import Any, Dict, Optional
import json
import os
from threading import Lock

import boto3
from boto3.session import Session
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from tx_router.reporters.base import Reporter
from tx_router.types.report import Report
from tx_router.utils.logger import logger
from tx_router.utils.exceptions import ConfigurationError, ReporterError
from tx_router.utils.serializer import Serializer


class SQSReporter(Reporter):
    """
    AWS SQS implementation of the Reporter interface.

    Each routed report is serialized to JSON and sent as one SQS message, with
    the chain, subscription and report type as message attributes so consumers
    can fan out without parsing the body.
    """

    # Reduced effective size to account for metadata overhead
    SQS_EFFECTIVE_SIZE_LIMIT = 240 * 1024

    def __init__(
        self,
        name: str = "sqs",
        queue_url: Optional[str] = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        source: Optional[str] = None,
    ):
        """
        Initialize the SQS reporter with configuration.

        Args:
            name: The name subscriptions use to address this reporter.
            queue_url: The URL of the SQS queue. Defaults to SQS_QUEUE_URL
                environment variable.
            region: The AWS region. Defaults to AWS_REGION environment variable.
            endpoint_url: The AWS endpoint URL. Defaults to AWS_ENDPOINT_URL
                environment variable.
            aws_access_key_id: The AWS access key ID. Defaults to AWS_ACCESS_KEY_ID
                environment variable.
            aws_secret_access_key: The AWS secret access key. Defaults to
                AWS_SECRET_ACCESS_KEY environment variable.
            source: The source identifier for the messages. Defaults to SOURCE
                 environment variable.

        Raises:
            ConfigurationError: If any required configuration parameter is missing.
        """
        self._name = name
        self._init_configuration(
            queue_url,
            region,
            endpoint_url,
            aws_access_key_id,
            aws_secret_access_key,
            source,
        )
        self.serializer = Serializer()
        self._client = None
        self._client_lock = Lock()
        self._session = None

    def _init_configuration(
        self,
        queue_url: Optional[str],
        region: Optional[str],
        endpoint_url: Optional[str],
        aws_access_key_id: Optional[str],
        aws_secret_access_key: Optional[str],
        source: Optional[str],
    ) -> None:
        self.source = source or os.getenv("SOURCE") or "tx_router"

        self.queue_url = queue_url or os.getenv("SQS_QUEUE_URL")
        if not self.queue_url:
            raise ConfigurationError("SQS_QUEUE_URL is required")

        self.region = region or os.getenv("AWS_REGION")
        if not self.region:
            raise ConfigurationError("AWS_REGION is required")

        self.endpoint_url = endpoint_url or os.getenv("AWS_ENDPOINT_URL")
        if not self.endpoint_url:
            raise ConfigurationError("AWS_ENDPOINT_URL is required")

        self.aws_access_key_id = aws_access_key_id or os.getenv("AWS_ACCESS_KEY_ID")
        if not self.aws_access_key_id:
            raise ConfigurationError("AWS_ACCESS_KEY_ID is required")

        self.aws_secret_access_key = aws_secret_access_key or os.getenv(
            "AWS_SECRET_ACCESS_KEY"
        )
        if not self.aws_secret_access_key:
            raise ConfigurationError("AWS_SECRET_ACCESS_KEY is required")

    def _create_session(self) -> Session:
        """
        Create a boto3 session with the configured credentials.

        Returns:
            Session: The configured boto3 session.
        """
        if self._session is None:
            self._session = boto3.session.Session(
                region_name=self.region,
                aws_access_key_id=self.aws_access_key_id,
                aws_secret_access_key=self.aws_secret_access_key,
            )
        return self._session

    def _get_client(self) -> Any:
        """
        Get or create the boto3 SQS client.

        Returns:
            Any: The configured boto3 SQS client.
        """
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    session = self._create_session()

                    config = Config(
                        connect_timeout=3,
                        read_timeout=5,
                        retries={"max_attempts": 3},
                        tcp_keepalive=True,
                    )

                    self._client = session.client(
                        "sqs", endpoint_url=self.endpoint_url, config=config
                    )

                    logger.debug(
                        f"Setup SQS client: {self.queue_url} - {self.endpoint_url} "
                        f"- {self.region}"
                    )

        return self._client

    def init(self) -> None:
        self._get_client()

    def name(self) -> str:
        return self._name

    def enabled(self) -> bool:
        return bool(self.queue_url)

    def send(self, report: Report) -> None:
        """
        Send one routed report to SQS.

        Args:
            report: The report to send.

        Raises:
            ReporterError: If serialization or sending fails.
        """
        body = self._prepare_body(report)
        attributes = self._message_attributes(report)

        try:
            response = self._get_client().send_message(
                QueueUrl=self.queue_url,
                MessageBody=body,
                MessageAttributes=attributes,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"SQS send_message failed: {str(e)}")
            raise ReporterError(f"Failed to send report to SQS: {str(e)}")

        logger.debug(f"Sent report to SQS: {response.get('MessageId')}")

    def _prepare_body(self, report: Report) -> str:
        """
        Serialize a report, replacing it with a reference if it is too large.

        Raises:
            ReporterError: If the report cannot be serialized.
        """
        try:
            body = self.serializer.dumps(report)
        except (TypeError, ValueError) as e:
            raise ReporterError(f"Failed to serialize report: {e}")

        body_size = len(body.encode("utf-8"))
        if body_size <= self.SQS_EFFECTIVE_SIZE_LIMIT:
            return body

        logger.warning(f"Report size exceeds SQS limit: {body_size} bytes")
        return json.dumps(self._create_oversized_reference(report))

    def _create_oversized_reference(self, report: Report) -> Dict[str, Any]:
        """
        Create a small reference body for an oversized report.

        Args:
            report: The original report

        Returns:
            Dict[str, Any]: Reference body
        """
        reportable = report.reportable
        logger.info(f"Created reference for oversized report: {reportable.get_hash()}")
        return {
            "original_size_exceeded": True,
            "chain": report.chain,
            "type": reportable.type(),
            "hash": reportable.get_hash(),
        }

    def _message_attributes(self, report: Report) -> Dict[str, Dict[str, str]]:
        attributes = {
            "source": {"StringValue": self.source, "DataType": "String"},
            "chain": {"StringValue": report.chain, "DataType": "String"},
            "type": {"StringValue": report.reportable.type(), "DataType": "String"},
        }
        if report.subscription is not None:
            attributes["subscription"] = {
                "StringValue": report.subscription.name,
                "DataType": "String",
            }
        return attributes

    def close(self) -> None:
        """
        Clean up resources.

        No persistent resources to close for SQS connections.
        """
        self._client = None
