"""HTTP header helpers."""

from __future__ import annotations

import re

_LINK_PART = re.compile(r'<([^>]*)>\s*((?:;\s*[^;,]+)*)')
_REL_PARAM = re.compile(r';\s*rel\s*=\s*"?([^";]+)"?', re.IGNORECASE)


def parse_link_header(value: str | None) -> dict[str, str]:
    """Parse an RFC 8288 ``Link`` header into ``{rel: url}``.

    A link with several space-separated relation types is registered under
    each of them. The first link wins when a relation repeats.

    Examples:
        >>> parse_link_header('<https://api.example.com/items?page=2>; rel="next"')
        {'next': 'https://api.example.com/items?page=2'}
    """
    links: dict[str, str] = {}
    if not value:
        return links
    for match in _LINK_PART.finditer(value):
        url, params = match.group(1).strip(), match.group(2)
        rel = _REL_PARAM.search(params)
        if not rel:
            continue
        for name in rel.group(1).split():
            links.setdefault(name.lower(), url)
    return links
