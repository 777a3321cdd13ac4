import re

from .errors import InvalidTitle

# latin and cyrillic letters, digits and hyphen
_FORBIDDEN = re.compile(r"[^a-z0-9а-яё\-]")


def sanitize_title(raw: str) -> str:
    """Lowercase the title and replace every character outside the allowed class.

    >>> sanitize_title("Hello World!")
    'hello-world-'
    """
    if raw is None or not raw.strip():
        raise InvalidTitle("Title must not be empty")
    return _FORBIDDEN.sub("-", raw.strip().lower())


class TitlePolicy:
    """Turns user supplied titles into storage keys.

    The same policy is applied on create and on every lookup, so a title
    always resolves to the key it was stored under.
    """

    def __init__(self, sanitize: bool = True):
        self.sanitize = sanitize

    def key(self, raw: str) -> str:
        if self.sanitize:
            return sanitize_title(raw)
        if raw is None or not raw.strip():
            raise InvalidTitle("Title must not be empty")
        return raw.strip()
