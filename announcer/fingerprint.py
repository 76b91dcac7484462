"""Content fingerprints used to detect announcement changes."""

import hashlib


def fingerprint(title: str, body: str) -> str:
    """Compute the fingerprint of an announcement's title and body.

    The title is length-prefixed so that moving characters between the two
    fields always changes the digest.

    Args:
        title: Announcement title
        body: Announcement body

    Returns:
        Lowercase hex SHA-256 digest
    """
    encoded_title = title.encode("utf-8")
    digest = hashlib.sha256()
    digest.update(f"{len(encoded_title)}:".encode("ascii"))
    digest.update(encoded_title)
    digest.update(body.encode("utf-8"))
    return digest.hexdigest()
