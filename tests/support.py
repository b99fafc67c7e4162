import re

from fakes import RecordingNotifier

PASSWORD = "password123"


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def last_code(outbox: RecordingNotifier) -> str:
    _, body = outbox.sent[-1]
    return re.search(r"\b(\d{6})\b", body).group(1)
