"""Slack message rendering."""

import re

from announcer.models.announcement import Announcement

_MARKDOWN_LINK = re.compile(r"\[(.*?)\]\((.*?)\)")


def markdown_links_to_mrkdwn(text: str) -> str:
    """Rewrite [text](url) links to Slack's <url|text> form."""
    return _MARKDOWN_LINK.sub(r"<\2|\1>", text)


def render_message(announcement: Announcement) -> str:
    """Render an announcement as a Slack message.

    Args:
        announcement: Announcement to render

    Returns:
        Linked title on the first line followed by the body
    """
    if announcement.link:
        heading = f"<{announcement.link}|{announcement.title}>"
    else:
        heading = f"*{announcement.title}*"
    return f"{heading}\n{markdown_links_to_mrkdwn(announcement.body)}"
