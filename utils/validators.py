import re

USERNAME_RE = re.compile(r"^[A-Za-z0-9_.@-]{3,32}$")


def is_valid_username(username: str) -> bool:
    return bool(USERNAME_RE.match(username))


def is_non_negative_int(text: str) -> bool:
    return bool(re.fullmatch(r"\d+", text.strip()))
