"""
Per-type sanitization rules for submitted form values.

Each rule is a pure function taking one raw value and returning the
cleaned value. Rules never raise on bad input: anything unusable
collapses to an empty string (or False for booleans).

Value-safe: No logging of field values.
"""
import re
from typing import Any, Iterable, Optional

import bleach
from markupsafe import escape

from form_sanitizer.core.config import get_settings


# Characters PHP's trim() removes by default
_TRIM_CHARS = " \t\n\r\0\x0b"

# A '<' that does not open a complete tag (runs to the next '<', a '>' or end of text)
_LESS_THAN_REGEX = re.compile(r"<[^>]*?(?:(?=<)|>|$)")

# Script and style blocks are dropped together with their content
_SCRIPT_STYLE_REGEX = re.compile(r"<(script|style)[^>]*?>.*?</\1>", re.IGNORECASE | re.DOTALL)

# No markup survives the text rules
_ALLOWED_TAGS: frozenset = frozenset()
_ALLOWED_ATTRIBUTES: dict = {}

_LINE_WHITESPACE_REGEX = re.compile(r"[\r\n\t ]+")
_MULTI_SPACE_REGEX = re.compile(r" +")
_PERCENT_OCTET_REGEX = re.compile(r"%[a-f0-9]{2}", re.IGNORECASE)

# Email
_EMAIL_LOCAL_REGEX = re.compile(r"[^a-zA-Z0-9!#$%&'*+/=?^_`{|}~.-]")
_EMAIL_DOTS_REGEX = re.compile(r"\.{2,}")
_EMAIL_LABEL_REGEX = re.compile(r"[^a-z0-9-]+", re.IGNORECASE)
_EMAIL_MIN_LENGTH = 6

# Number
_SIGNED_INT_CHARS_REGEX = re.compile(r"[^0-9+-]")

# URL
_URL_DISALLOWED_REGEX = re.compile(
    r"[^a-z0-9\-~+_.?#=!&;,/:%@$|*'()\[\]\u0080-\U0010ffff]", re.IGNORECASE
)
_URL_NEWLINE_REGEX = re.compile(r"%0[ad]", re.IGNORECASE)
_URL_PHP_FILE_REGEX = re.compile(r"^[a-z0-9-]+?\.php", re.IGNORECASE)
_URL_SCHEME_REGEX = re.compile(r"^([^:/?#]+?)(?::|&#0*58;|&#x0*3a;)", re.IGNORECASE)
_URL_AUTHORITY_REGEX = re.compile(r"^((?:[a-z][a-z0-9+.-]*:)?//[^/?#]*)?(.*)$", re.IGNORECASE | re.DOTALL)

# Key
_KEY_DISALLOWED_REGEX = re.compile(r"[^A-Za-z0-9_-]")

# Checkbox strings that mean "unchecked" (compared lowercased and trimmed)
FALSE_STRINGS = frozenset({"", "0", "false", "off", "no"})


def coerce_text(value: Any) -> str:
    """
    Turn a raw submitted value into a string a text rule can work on.

    Scalars are stringified; lists, uploads and other objects become "".
    Strings that cannot be encoded as UTF-8 (lone surrogates) become "".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return ""
    if isinstance(value, (int, float)):
        return str(value)
    if not isinstance(value, str):
        return ""

    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return ""
    return value


def _escape_stray_less_than(match: "re.Match[str]") -> str:
    fragment = match.group(0)
    if ">" in fragment:
        return fragment
    return str(escape(fragment))


def strip_all_tags(text: str) -> str:
    """
    Remove script/style blocks, HTML comments and every remaining tag.

    Tags are parsed by bleach, so a '>' inside a quoted attribute does not
    end the tag. Text around the tags comes back HTML-escaped.
    """
    text = _SCRIPT_STYLE_REGEX.sub("", text)
    return bleach.clean(
        text,
        tags=_ALLOWED_TAGS,
        attributes=_ALLOWED_ATTRIBUTES,
        strip=True,
        strip_comments=True,
    )


def _sanitize_text(value: Any, keep_newlines: bool) -> str:
    filtered = coerce_text(value)

    if "<" in filtered:
        filtered = _LESS_THAN_REGEX.sub(_escape_stray_less_than, filtered)
        filtered = strip_all_tags(filtered).strip(_TRIM_CHARS)

    if not keep_newlines:
        filtered = _LINE_WHITESPACE_REGEX.sub(" ", filtered)

    filtered = filtered.strip(_TRIM_CHARS)

    found = False
    while _PERCENT_OCTET_REGEX.search(filtered):
        filtered = _PERCENT_OCTET_REGEX.sub("", filtered)
        found = True

    if found:
        filtered = _MULTI_SPACE_REGEX.sub(" ", filtered).strip(_TRIM_CHARS)

    return filtered


def sanitize_text_field(value: Any) -> str:
    """
    Clean a single-line plain-text value.

    Rules:
    1. Non-scalar or invalid input becomes ""
    2. A '<' that does not open a tag is encoded as &lt;
    3. Script/style blocks and all tags are stripped; text that carried
       markup comes back HTML-escaped (&amp;, &lt;, &gt;)
    4. Runs of whitespace (including newlines) collapse to one space
    5. Percent-encoded octets are removed
    6. Leading/trailing whitespace is trimmed

    Args:
        value: Raw submitted value

    Returns:
        Cleaned string (possibly empty)
    """
    return _sanitize_text(value, keep_newlines=False)


def sanitize_textarea_field(value: Any) -> str:
    """Same as sanitize_text_field, but internal newlines and spacing survive."""
    return _sanitize_text(value, keep_newlines=True)


def sanitize_email(value: Any) -> str:
    """
    Best-effort cleanup of an email address.

    Characters not allowed in the local part are dropped, domain labels
    are reduced to letters, digits and hyphens. Anything that cannot be
    turned into local@label.label returns "".
    """
    email = coerce_text(value)

    if len(email) < _EMAIL_MIN_LENGTH:
        return ""

    # '@' must appear after the first character
    if email.find("@", 1) == -1:
        return ""

    local, domain = email.split("@", 1)

    local = _EMAIL_LOCAL_REGEX.sub("", local)
    if not local:
        return ""

    domain = _EMAIL_DOTS_REGEX.sub("", domain)
    domain = domain.strip(_TRIM_CHARS + ".")
    if not domain:
        return ""

    labels = domain.split(".")
    if len(labels) < 2:
        return ""

    cleaned_labels = []
    for label in labels:
        label = _EMAIL_LABEL_REGEX.sub("", label.strip(_TRIM_CHARS + "-"))
        if label:
            cleaned_labels.append(label)

    if len(cleaned_labels) < 2:
        return ""

    return f"{local}@{'.'.join(cleaned_labels)}"


def sanitize_number_int(value: Any) -> str:
    """
    Keep only the characters of a signed integer.

    Digits keep their order. A single '+' or '-' is kept when a sign
    appears before the first digit; every other character is dropped.
    A value without digits becomes "".

    Examples:
        "abc123"  -> "123"
        "-12.5kg" -> "-125"
        "1-800"   -> "1800"
    """
    kept = _SIGNED_INT_CHARS_REGEX.sub("", coerce_text(value))

    sign = ""
    digits = []
    for char in kept:
        if char.isdigit():
            digits.append(char)
        elif not digits:
            # Last sign seen before the first digit wins
            sign = char

    if not digits:
        return ""
    return sign + "".join(digits)


def _url_scheme(url: str) -> Optional[str]:
    match = _URL_SCHEME_REGEX.match(url)
    if match is None:
        return None
    return match.group(1).lower()


def _encode_brackets_after_authority(url: str) -> str:
    # Brackets are only legal inside an IPv6 host
    match = _URL_AUTHORITY_REGEX.match(url)
    front = match.group(1) or ""
    rest = match.group(2).replace("[", "%5B").replace("]", "%5D")
    return front + rest


def sanitize_url(value: Any, allowed_protocols: Optional[Iterable[str]] = None) -> str:
    """
    Clean a URL for storage.

    Disallowed characters and encoded CR/LF are removed, a missing
    scheme gets 'http://', and a scheme outside the allowed protocols
    makes the whole value "".

    Args:
        value: Raw submitted value
        allowed_protocols: Accepted schemes; defaults to Settings.allowed_url_protocols

    Returns:
        Cleaned URL or ""
    """
    url = coerce_text(value)
    if not url:
        return ""

    url = url.lstrip(_TRIM_CHARS).replace(" ", "%20")
    url = _URL_DISALLOWED_REGEX.sub("", url)
    if not url:
        return ""

    if not url.lower().startswith("mailto:"):
        while _URL_NEWLINE_REGEX.search(url):
            url = _URL_NEWLINE_REGEX.sub("", url)
        if not url:
            return ""

    url = url.replace(";//", "://")

    if ":" not in url and url[0] not in "/#?" and not _URL_PHP_FILE_REGEX.match(url):
        url = "http://" + url

    if "[" in url or "]" in url:
        url = _encode_brackets_after_authority(url)

    if url[0] == "/":
        return url

    scheme = _url_scheme(url)
    if scheme is None:
        return url

    if allowed_protocols is None:
        allowed_protocols = get_settings().allowed_url_protocols
    if scheme not in {p.lower() for p in allowed_protocols}:
        return ""

    return url


def sanitize_boolean(value: Any) -> bool:
    """
    Coerce a checkbox-style value to a strict boolean.

    "", "0", "false", "off" and "no" (any case, surrounding whitespace
    ignored) are False; any other string is True.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, bytes):
        value = coerce_text(value)
    if not isinstance(value, str):
        return False
    return value.strip().lower() not in FALSE_STRINGS


def sanitize_key(value: Any) -> str:
    """Reduce a value to a lowercase key of ASCII letters, digits, '_' and '-'."""
    return _KEY_DISALLOWED_REGEX.sub("", coerce_text(value)).lower()
