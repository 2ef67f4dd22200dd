from dataclasses import dataclass, field
from enum import Enum


class Stage(str, Enum):
    """Screens of the verification workflow, in the order a user meets them."""

    LOGIN = "login"
    UPLOAD = "upload"
    PROCESSING = "processing"
    RESULTS = "results"


@dataclass(frozen=True)
class Session:
    """Signed-in user. The password is kept only for the session's lifetime."""

    email: str
    password: str = field(repr=False)
    display_name: str | None = None
    is_signup: bool = False
