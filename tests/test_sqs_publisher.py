import json
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from teamup.modules.notifications.publisher import (
    PublishError, SqsNotificationPublisher, build_publisher
)
from teamup.modules.notifications.schemas import NotificationMessage

QUEUE_URL = "https://sqs.us-east-1.amazonaws.com/123456789012/teamup-notifications"


def _msg(to="ops@example.com", subject="s"):
    return NotificationMessage(to=to, subject=subject, message="body")


def test_publish_sends_json_batch():
    client = MagicMock()
    client.send_message_batch.return_value = {"Successful": [{"Id": "0"}], "Failed": []}
    publisher = SqsNotificationPublisher(QUEUE_URL, sqs_client=client)

    publisher.publish([_msg(subject="Group updated: Team")])

    client.send_message_batch.assert_called_once()
    kwargs = client.send_message_batch.call_args.kwargs
    assert kwargs["QueueUrl"] == QUEUE_URL
    entry = kwargs["Entries"][0]
    assert "MessageGroupId" not in entry
    assert json.loads(entry["MessageBody"]) == {
        "type": "email",
        "to": "ops@example.com",
        "subject": "Group updated: Team",
        "message": "body",
    }


def test_publish_empty_list_is_noop():
    client = MagicMock()
    SqsNotificationPublisher(QUEUE_URL, sqs_client=client).publish([])
    client.send_message_batch.assert_not_called()


def test_publish_chunks_batches_of_ten():
    client = MagicMock()
    client.send_message_batch.return_value = {"Successful": [], "Failed": []}
    publisher = SqsNotificationPublisher(QUEUE_URL, sqs_client=client)

    publisher.publish([_msg(subject=str(i)) for i in range(23)])

    sizes = [len(c.kwargs["Entries"]) for c in client.send_message_batch.call_args_list]
    assert sizes == [10, 10, 3]


def test_fifo_queue_sets_group_and_dedup_ids():
    client = MagicMock()
    client.send_message_batch.return_value = {"Failed": []}
    publisher = SqsNotificationPublisher(QUEUE_URL + ".fifo", sqs_client=client)

    publisher.publish([_msg(to="a@example.com"), _msg(to="a@example.com")])

    entries = client.send_message_batch.call_args.kwargs["Entries"]
    assert [e["MessageGroupId"] for e in entries] == ["a@example.com", "a@example.com"]
    assert entries[0]["MessageDeduplicationId"] != entries[1]["MessageDeduplicationId"]


def test_failed_entries_raise():
    client = MagicMock()
    client.send_message_batch.return_value = {
        "Failed": [{"Id": "0", "Code": "InternalError", "Message": "try again"}]
    }
    publisher = SqsNotificationPublisher(QUEUE_URL, sqs_client=client)

    with pytest.raises(PublishError, match="try again"):
        publisher.publish([_msg()])


def test_client_error_raises_publish_error():
    client = MagicMock()
    client.send_message_batch.side_effect = ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "SendMessageBatch"
    )
    publisher = SqsNotificationPublisher(QUEUE_URL, sqs_client=client)

    with pytest.raises(PublishError):
        publisher.publish([_msg()])


def test_queue_url_required():
    with pytest.raises(ValueError):
        SqsNotificationPublisher("", sqs_client=MagicMock())


@patch("teamup.modules.notifications.publisher.settings")
def test_build_publisher_disabled_without_queue(mock_settings):
    mock_settings.notification_queue_url = None
    assert build_publisher() is None


@patch("teamup.modules.notifications.publisher.boto3")
@patch("teamup.modules.notifications.publisher.settings")
def test_build_publisher_uses_settings(mock_settings, mock_boto3):
    mock_settings.notification_queue_url = QUEUE_URL
    mock_settings.aws_region = "eu-west-1"

    publisher = build_publisher()

    assert isinstance(publisher, SqsNotificationPublisher)
    assert mock_boto3.client.call_args.args == ("sqs",)
    assert mock_boto3.client.call_args.kwargs["region_name"] == "eu-west-1"
