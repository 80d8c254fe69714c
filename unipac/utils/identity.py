from dataclasses import dataclass

import psutil


@dataclass(frozen=True)
class Identity:
    """Who unipac is running as. Passed explicitly to the resolver."""

    uid: int
    user: str

    @property
    def is_superuser(self) -> bool:
        return self.uid == 0


def current() -> Identity:
    proc = psutil.Process()
    uid = proc.uids().effective
    try:
        user = proc.username()
    except (KeyError, psutil.Error):
        user = str(uid)
    return Identity(uid=uid, user=user)
