import logging

import httpx
from django.conf import settings

logger = logging.getLogger(__name__)


def send_slack_notification(message: str, blocks: list = None):
    """
    Send a message to Slack via webhook.

    Args:
        message: Plain text message to send
        blocks: Optional list of Slack Block Kit blocks for rich formatting

    Returns:
        True if message sent successfully, False otherwise

    Example:
        >>> from config.notifications import send_slack_notification
        >>> send_slack_notification("Hello from Django!")
    """
    if not settings.SLACK_WEBHOOK_URL:
        logger.info(f"No Slack webhook configured. Message: {message}")
        return False

    payload = {"text": message}

    if blocks:
        payload["blocks"] = blocks

    try:
        with httpx.Client() as client:
            response = client.post(
                settings.SLACK_WEBHOOK_URL,
                headers={"Content-type": "application/json"},
                json=payload,
                timeout=10.0
            )
            response.raise_for_status()
            return True
    except httpx.HTTPError as e:
        logger.warning(f"Failed to send Slack notification: {e}")
        return False


def send_sync_failure_notification(sync_log):
    """
    Alert operators that a sync attempt failed.

    Args:
        sync_log: The FAILED SyncLog

    Returns:
        True if notification sent successfully, False otherwise
    """
    details = sync_log.details or {}
    error = details.get('error') or sync_log.message or 'Unknown error'

    blocks = [
        {
            "type": "header",
            "text": {
                "type": "plain_text",
                "text": f"{sync_log.get_sync_type_display()} Sync Failed",
                "emoji": True
            }
        },
        {
            "type": "section",
            "fields": [
                {
                    "type": "mrkdwn",
                    "text": f"*Sync Log:*\n#{sync_log.pk}"
                },
                {
                    "type": "mrkdwn",
                    "text": f"*Error Type:*\n{details.get('error_type', 'Unknown')}"
                }
            ]
        },
        {
            "type": "section",
            "text": {
                "type": "mrkdwn",
                "text": f"*Error:*\n```{error[:500]}```"
            }
        }
    ]

    if details.get('race_id'):
        blocks.append({
            "type": "context",
            "elements": [
                {
                    "type": "mrkdwn",
                    "text": f"Race id: {details['race_id']}"
                }
            ]
        })

    message = f"{sync_log.get_sync_type_display()} sync failed: {error}"
    return send_slack_notification(message, blocks)
