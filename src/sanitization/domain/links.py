import re

LINK_PREFIXES = ("https://", "http://")

_SEPARATORS = re.compile(r"[ \n]")


def extract_links(text: str) -> list[str]:
    """Return the http(s) links of a chat message, in order of appearance."""
    return [token for token in _SEPARATORS.split(text or "") if token.startswith(LINK_PREFIXES)]
