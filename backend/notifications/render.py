"""
Rendering of notification emails.

Every event kind has a Renderer entry in RENDERERS producing the info line
for one notification, as plain text and as HTML. Message bodies are built
from a recipient's grouped notifications: one section per event kind,
headed by the event name, with one line per notification in detection order.
"""

from html import escape
from typing import Callable, NamedTuple

from config.notification_settings import SITE_DOMAIN
from models.notification import (
    Notification,
    ValidatorBalanceDecreasedNotification,
    ValidatorSlashedNotification,
)
from models.types import EventName
from notifications.aggregator import RecipientNotifications
from shared.utils import format_eth, gwei_to_eth


class Renderer(NamedTuple):
    text: Callable[[Notification, str], str]
    html: Callable[[Notification, str], str]


def _balance_amounts(n: ValidatorBalanceDecreasedNotification) -> tuple[str, str]:
    balance = gwei_to_eth(n.balance)
    decrease = gwei_to_eth(n.prev_balance) - balance
    return format_eth(decrease), format_eth(balance)


def _balance_decreased_text(n: ValidatorBalanceDecreasedNotification, domain: str) -> str:
    decrease, balance = _balance_amounts(n)
    return (
        f"The balance of validator {n.validator_index} (https://{domain}/validator/{n.validator_index}) "
        f"decreased by {decrease} ETH to {balance} ETH "
        f"at epoch {n.epoch} (https://{domain}/epoch/{n.epoch})."
    )


def _balance_decreased_html(n: ValidatorBalanceDecreasedNotification, domain: str) -> str:
    decrease, balance = _balance_amounts(n)
    domain = escape(domain)
    return (
        f'The balance of validator <a href="https://{domain}/validator/{n.validator_index}">{n.validator_index}</a> '
        f"decreased by {decrease} ETH to {balance} ETH "
        f'at epoch <a href="https://{domain}/epoch/{n.epoch}">{n.epoch}</a>.'
    )


def _slashed_text(n: ValidatorSlashedNotification, domain: str) -> str:
    return (
        f"Validator {n.validator_index} (https://{domain}/validator/{n.validator_index}) "
        f"has been slashed at epoch {n.epoch} (https://{domain}/epoch/{n.epoch})."
    )


def _slashed_html(n: ValidatorSlashedNotification, domain: str) -> str:
    domain = escape(domain)
    return (
        f'Validator <a href="https://{domain}/validator/{n.validator_index}">{n.validator_index}</a> '
        f'has been slashed at epoch <a href="https://{domain}/epoch/{n.epoch}">{n.epoch}</a>.'
    )


RENDERERS: dict[EventName, Renderer] = {
    EventName.VALIDATOR_BALANCE_DECREASED: Renderer(_balance_decreased_text, _balance_decreased_html),
    EventName.VALIDATOR_GOT_SLASHED: Renderer(_slashed_text, _slashed_html),
}


def render_info(notification: Notification, domain: str = SITE_DOMAIN) -> str:
    """Plain text info line for one notification."""
    return RENDERERS[notification.event_name].text(notification, domain)


def render_info_html(notification: Notification, domain: str = SITE_DOMAIN) -> str:
    """HTML info line for one notification."""
    return RENDERERS[notification.event_name].html(notification, domain)


def build_message_text(events: RecipientNotifications, domain: str = SITE_DOMAIN) -> str:
    """
    Build the plain text body for one recipient.

    Args:
        events: Event kind -> notifications, as absorbed during the cycle
        domain: Site domain for links

    Returns:
        Body text, sections separated by a blank line
    """
    sections = []
    for event_name, notifications in events.items():
        section = f"{event_name.value}\n====\n\n"
        for notification in notifications:
            section += f"{render_info(notification, domain)}\n"
        sections.append(section)

    return "\n".join(sections)


def build_message_html(events: RecipientNotifications, domain: str = SITE_DOMAIN) -> str:
    """Build the HTML alternative of build_message_text()."""
    html = ""
    for event_name, notifications in events.items():
        html += f"<h3>{escape(event_name.value)}</h3>\n<ul>\n"
        for notification in notifications:
            html += f"  <li>{render_info_html(notification, domain)}</li>\n"
        html += "</ul>\n"

    return html
