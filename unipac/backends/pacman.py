# unipac/backends/pacman.py

import subprocess
import logging

from unipac import config
from unipac.utils.identity import Identity
from unipac.utils.errors import NotFound, InstallError, BackendMissing

logger = logging.getLogger(__name__)


def _run(cmd: list[str], capture: bool = False) -> subprocess.CompletedProcess:
    logger.debug("exec %s", cmd)
    try:
        if capture:
            return subprocess.run(cmd, capture_output=True, text=True)
        return subprocess.run(cmd)
    except FileNotFoundError:
        raise BackendMissing(cmd[0])


def _pacman(*args: str) -> list[str]:
    return [config.PACMAN, *args]


def _privileged(ident: Identity, *args: str) -> list[str]:
    """
    pacman argv for operations that touch the package database.
    `sudo` is only prepended when `ident` is not already root.
    """
    cmd = _pacman(*args)
    if ident.is_superuser:
        return cmd
    return [config.SUDO] + cmd


def _lines(*args: str) -> list[str]:
    proc = _run(_pacman(*args), capture=True)
    if proc.returncode != 0:
        return []
    return [l for l in proc.stdout.splitlines() if l.strip()]


def _fields(text: str) -> dict:
    """
    Parse the first `Key : value` block of `pacman -Qi/-Si` output.
    Wrapped continuation lines are folded into the previous key.
    """
    data = {}
    key = None
    for l in text.splitlines():
        if not l.strip():
            if data:
                break
            continue
        if l[0].isspace() and key:
            data[key] += " " + l.strip()
            continue
        k, sep, v = l.partition(":")
        if sep:
            key = k.strip()
            data[key] = v.strip()
    return data


def available(name: str) -> bool:
    """
    True if `pacman -S name` has something to install: a package, a group
    or a virtual provider.
    """
    return _run(_pacman("-Sp", "--print-format", "%n", name), capture=True).returncode == 0


def install(name: str, ident: Identity):
    """
    Install one package from the official repositories.

    Raises NotFound when no sync database carries the package, so the caller
    can fall back to the AUR, and InstallError when pacman knows the package
    but the transaction fails.
    """
    if not available(name):
        raise NotFound(name, "official")
    cmd = _privileged(ident, "-S", "--noconfirm", name)
    proc = _run(cmd)
    if proc.returncode != 0:
        logger.debug("Install failed %s → %s", cmd, proc.returncode)
        raise InstallError(f"pacman exited with status {proc.returncode} installing {name}")


def install_file(path, ident: Identity) -> int:
    return _run(_privileged(ident, "-U", "--noconfirm", str(path))).returncode


def reinstall(names: list[str], ident: Identity) -> int:
    return _run(_privileged(ident, "-S", "--noconfirm", *names)).returncode


def remove(names: list[str], ident: Identity) -> int:
    return _run(_privileged(ident, "-Rs", *names)).returncode


def sync(ident: Identity) -> int:
    return _run(_privileged(ident, "-Sy")).returncode


def upgrade(ident: Identity, ignore: list[str] = ()) -> int:
    args = ["-Syu"]
    if ignore:
        args += ["--ignore", ",".join(ignore)]
    return _run(_privileged(ident, *args)).returncode


def clean(ident: Identity) -> int:
    return _run(_privileged(ident, "-Sc")).returncode


def orphan_names() -> list[str]:
    return _lines("-Qdtq")


def autoremove(ident: Identity) -> int:
    names = orphan_names()
    if not names:
        return 0
    return _run(_privileged(ident, "-Rns", *names)).returncode


def search(query: str) -> int:
    return _run(_pacman("-Ss", query)).returncode


def info(names: list[str]) -> int:
    return _run(_pacman("-Si", *names)).returncode


def query(names: list[str]) -> int:
    return _run(_pacman("-Q", *names)).returncode


def owner(paths: list[str]) -> int:
    return _run(_pacman("-Qo", *paths)).returncode


def files(names: list[str]) -> int:
    return _run(_pacman("-Ql", *names)).returncode


def orphans() -> int:
    return _run(_pacman("-Qdt")).returncode


def check() -> int:
    return _run(_pacman("-Dk")).returncode


def changelog(names: list[str]) -> int:
    return _run(_pacman("-Qc", *names)).returncode


def verify(names: list[str]) -> int:
    return _run(_pacman("-Qkk", *names)).returncode


def version() -> int:
    return _run(_pacman("-V")).returncode


def field(name: str, key: str, local: bool = True) -> str | None:
    """
    Single field from `pacman -Qi` (local) or `pacman -Si` (sync db).
    None if the package is unknown.
    """
    proc = _run(_pacman("-Qi" if local else "-Si", name), capture=True)
    if proc.returncode != 0:
        return None
    return _fields(proc.stdout).get(key)


def count(*flags: str) -> int:
    """Number of packages listed by `pacman -Qq<flags>`."""
    return len(_lines("-Qq" + "".join(flags)))
