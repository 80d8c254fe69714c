# unipac/backends/aurbuild.py

import contextlib
import logging
import shutil
import subprocess
import tempfile
from pathlib import Path

import pygit2

from unipac import config
from unipac.backends import aur
from unipac.utils.errors import NotFound, CloneError, BuildError, BackendMissing

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def workspace():
    """
    Fresh build directory, removed on every way out of the block.
    """
    path = Path(tempfile.mkdtemp(prefix="unipac-", dir=config.BUILD_ROOT))
    logger.debug("workspace %s created", path)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        logger.debug("workspace %s removed", path)


def clone(pkgbase: str, dest: Path) -> Path:
    url = config.AUR_GIT_URL.format(pkgbase)
    try:
        pygit2.clone_repository(url, str(dest))
    except pygit2.GitError as e:
        raise CloneError(f"could not clone {url}: {e}") from e
    return dest


def build(recipe: Path):
    """Run makepkg in `recipe`, installing the result."""
    cmd = [config.MAKEPKG, "-si", "--noconfirm"]
    logger.debug("exec %s in %s", cmd, recipe)
    try:
        proc = subprocess.run(cmd, cwd=recipe)
    except FileNotFoundError:
        raise BackendMissing(cmd[0])
    if proc.returncode != 0:
        raise BuildError(f"makepkg exited with status {proc.returncode}")


def build_and_install(name: str, directory=aur):
    """
    Clone the AUR recipe for `name` into a throwaway workspace, build it and
    install it.

    The existence check happens before anything touches the disk, so a
    package the AUR does not know never gets a workspace.
    """
    record = directory.info(name)
    if record is None:
        raise NotFound(name, "aur")

    pkgbase = record.get("PackageBase") or name
    with workspace() as ws:
        recipe = clone(pkgbase, ws / pkgbase)
        build(recipe)
