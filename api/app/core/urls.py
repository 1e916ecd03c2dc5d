from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

TRACKING_PARAMS = frozenset(
    {
        # marketing attribution
        "utm_source",
        "utm_medium",
        "utm_campaign",
        "utm_term",
        "utm_content",
        "utm_id",
        "utm_source_platform",
        "utm_creative_format",
        "utm_marketing_tactic",
        # click identifiers
        "gclid",
        "fbclid",
        "yclid",
        "irclickid",
        # mailchimp
        "mc_cid",
        "mc_eid",
        "spm",
        "gbraid",
        "wbraid",
        "vero_conv",
        "vero_id",
        "ref",
        "ref_src",
        "ref_url",
        # video platforms
        "list",
        "index",
        "t",
        "start",
        "end",
        "feature",
        "app",
        "si",
        "pp",
        "ab_channel",
        "source",
        "kw",
        # search engines
        "gws_rd",
        "ei",
        "ved",
        "usg",
        "sa",
        "rlz",
        "biw",
        "bih",
    }
)
TRACKING_PARAM_PREFIXES = ("utm_", "mc_", "vero_", "ref_")

DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443, "ftp": 21}
SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*$")
FORBIDDEN_HOST_CHARS = frozenset(" \t\r\n#%/:<>?@[\\]^|\"'`{}")


class InvalidURLError(ValueError):
    """Raised when a raw string cannot be parsed as a URL."""

    def __init__(self, raw_url: str) -> None:
        super().__init__(f"Invalid URL: {raw_url}")
        self.raw_url = raw_url


@dataclass(frozen=True, slots=True)
class CanonicalURL:
    canonical: str
    hash: str


def canonical_hash(canonical_url: str) -> str:
    return hashlib.sha256(canonical_url.encode("utf-8")).hexdigest()


def canonicalize(raw_url: str, *, keep_fragment: bool = True) -> CanonicalURL:
    """Normalize ``raw_url`` into its dedupe form and hash it.

    Scheme and host are lower-cased, tracking query parameters are removed
    (remaining ones keep their order), and a single trailing path slash is
    dropped unless the path is the root. Raises ``InvalidURLError`` when the
    input has no usable scheme or host.
    """
    canonical = normalize_url(raw_url, keep_fragment=keep_fragment)
    return CanonicalURL(canonical=canonical, hash=canonical_hash(canonical))


def normalize_url(raw_url: str, *, keep_fragment: bool = True) -> str:
    if not isinstance(raw_url, str):
        raise InvalidURLError(str(raw_url))

    try:
        parsed = urlsplit(raw_url.strip())
        port = parsed.port
    except ValueError as exc:
        raise InvalidURLError(raw_url) from exc

    scheme = parsed.scheme.lower()
    host = (parsed.hostname or "").lower()
    if not SCHEME_RE.match(scheme) or not _is_valid_host(host):
        raise InvalidURLError(raw_url)

    if port is not None and DEFAULT_PORTS.get(scheme) == port:
        port = None
    netloc = _build_netloc(parsed.netloc, host, port)

    path = parsed.path or "/"
    if path != "/" and path.endswith("/"):
        path = path[:-1]

    query = urlencode(
        [(key, value) for key, value in parse_qsl(parsed.query, keep_blank_values=True) if not is_tracking_param(key)],
        doseq=True,
    )
    fragment = parsed.fragment if keep_fragment else ""
    return urlunsplit((scheme, netloc, path, query, fragment))


def is_tracking_param(key: str) -> bool:
    return key in TRACKING_PARAMS or key.startswith(TRACKING_PARAM_PREFIXES)


def _is_valid_host(host: str) -> bool:
    if not host:
        return False
    if ":" in host:
        # urlsplit only yields a colon in the hostname for bracketed IPv6 literals
        return all(char in "0123456789abcdef:." for char in host)
    return not any(char in FORBIDDEN_HOST_CHARS for char in host)


def _build_netloc(original_netloc: str, host: str, port: int | None) -> str:
    userinfo, separator, _ = original_netloc.rpartition("@")
    netloc = f"[{host}]" if ":" in host else host
    if port is not None:
        netloc = f"{netloc}:{port}"
    if separator:
        netloc = f"{userinfo}@{netloc}"
    return netloc
