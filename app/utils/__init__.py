from urllib.parse import urlsplit, urlunsplit


def mask_url_credentials(url: str) -> str:
    """Hide the password part of ``user:password@host`` before a URL is logged."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if parts.password is None:
        return url
    netloc = f"{parts.username}:****@{parts.hostname}"
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit(parts._replace(netloc=netloc))
