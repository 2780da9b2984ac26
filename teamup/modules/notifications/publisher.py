"""Notification publishers: hand NotificationMessage batches to a queue."""
import uuid
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from teamup.config import settings
from teamup.modules.notifications.schemas import NotificationMessage

logger = logging.getLogger(__name__)

SQS_MAX_BATCH = 10


class PublishError(Exception):
    """Raised when a batch could not be serialized or handed to the broker."""


class NotificationPublisher(ABC):
    """Success means the broker accepted the messages, not that they were delivered.
    Publishers do not retry; retry policy belongs to the caller."""

    @abstractmethod
    def publish(self, messages: List[NotificationMessage]) -> None:
        ...


class SqsNotificationPublisher(NotificationPublisher):
    def __init__(self, queue_url: str, sqs_client=None):
        if not queue_url:
            raise ValueError("Notification queue URL must be configured")
        self.queue_url = queue_url
        self.is_fifo = queue_url.endswith(".fifo")
        self.sqs_client = sqs_client or boto3.client(
            "sqs",
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region
        )

    def _entry(self, index: int, message: NotificationMessage) -> dict:
        try:
            body = message.model_dump_json()
        except Exception as e:
            raise PublishError(f"serialize message: {e}") from e
        entry = {"Id": str(index), "MessageBody": body}
        if self.is_fifo:
            entry["MessageGroupId"] = message.to
            entry["MessageDeduplicationId"] = uuid.uuid4().hex
        return entry

    def publish(self, messages: List[NotificationMessage]) -> None:
        if not messages:
            return
        for start in range(0, len(messages), SQS_MAX_BATCH):
            chunk = messages[start:start + SQS_MAX_BATCH]
            entries = [self._entry(i, m) for i, m in enumerate(chunk)]
            try:
                response = self.sqs_client.send_message_batch(
                    QueueUrl=self.queue_url,
                    Entries=entries
                )
            except (BotoCoreError, ClientError) as e:
                logger.error(f"Failed to send notifications to SQS: {str(e)}")
                raise PublishError(f"send messages: {e}") from e
            failed = response.get("Failed") or []
            if failed:
                reasons = ", ".join(f.get("Message") or f.get("Code", "unknown") for f in failed)
                raise PublishError(f"{len(failed)} of {len(entries)} messages rejected: {reasons}")
            logger.debug(f"Published {len(entries)} notification(s) to {self.queue_url}")


def build_publisher() -> Optional[NotificationPublisher]:
    """Publisher from settings, or None when notifications are not configured."""
    if not settings.notification_queue_url:
        logger.warning("Notification queue URL not configured, notifications disabled")
        return None
    try:
        return SqsNotificationPublisher(settings.notification_queue_url)
    except Exception as e:
        logger.warning(f"Notification publisher initialization failed ({str(e)}), notifications disabled")
        return None
