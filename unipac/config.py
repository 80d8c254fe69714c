# unipac/config.py

import os
from pathlib import Path


def _env(key: str, default: str) -> str:
    return os.environ.get(f"UNIPAC_{key}", default)


AUR_RPC_URL = _env("AUR_RPC", "https://aur.archlinux.org/rpc/")
AUR_GIT_URL = _env("AUR_GIT", "https://aur.archlinux.org/{}.git")

HOLD_FILE = Path(
    _env("HOLD_FILE", str(Path.home() / ".config" / "unipac" / "holdlist"))
)
# None means the system temp directory
BUILD_ROOT = os.environ.get("UNIPAC_BUILD_ROOT") or None

PACMAN = _env("PACMAN", "pacman")
MAKEPKG = _env("MAKEPKG", "makepkg")
BSDTAR = _env("BSDTAR", "bsdtar")
SUDO = _env("SUDO", "sudo")
PACMAN_LOG = Path(_env("PACMAN_LOG", "/var/log/pacman.log"))
PKG_CACHE = Path(_env("PKG_CACHE", "/var/cache/pacman/pkg"))

HTTP_TIMEOUT = float(_env("HTTP_TIMEOUT", "15"))
RETRIES = int(_env("RETRIES", "2"))
RETRY_DELAY = float(_env("RETRY_DELAY", "1.0"))
