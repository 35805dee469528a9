"""
Email delivery via Resend API for notification system.

Sends one aggregated notification email per recipient.
"""

import os
from typing import Any, Dict

import resend
from dotenv import load_dotenv

from config.notification_settings import NOTIFICATION_FROM_EMAIL

load_dotenv()

# Initialize Resend with API key from environment
resend.api_key = os.getenv('RESEND_API_KEY')


def send_notification_email(
    recipient: str,
    subject: str,
    text_body: str,
    html_body: str | None = None,
) -> Dict[str, Any]:
    """
    Send a notification email.

    Args:
        recipient: Recipient email address
        subject: Email subject
        text_body: Plain text body
        html_body: Optional HTML alternative of the body

    Returns:
        Dictionary with 'success' (bool), 'email_id' (str if success), 'error' (str if failed)
    """
    if not text_body:
        return {'success': False, 'error': 'Empty message body'}

    params: Dict[str, Any] = {
        "from": f"beaconcha.in Notifications <{NOTIFICATION_FROM_EMAIL}>",
        "to": recipient,
        "subject": subject,
        "text": text_body,
    }
    if html_body:
        params["html"] = html_body

    try:
        response = resend.Emails.send(params)

        return {
            'success': True,
            'email_id': response.get('id')
        }

    except Exception as e:
        return {
            'success': False,
            'error': str(e)
        }
