# unipac/pkgmanager.py

import subprocess
import logging
from pathlib import Path

import psutil
from rich.console import Console
from rich.table import Table

from unipac import __version__, config
from unipac.backends import pacman, aur
from unipac.resolver import InstallResolver, Mode
from unipac.utils import identity
from unipac.utils.errors import handle_errors, err_console, LocalFileMissing, BackendMissing
from unipac.utils.holdlist import read_holdlist, hold, unhold

logger = logging.getLogger(__name__)
console = Console()


def _require(args: list[str], what: str):
    if not args:
        raise ValueError(f"{what} required")


@handle_errors
def install(names: list[str], mode: Mode = Mode.DEFAULT, ident=None) -> int:
    _require(names, "package name")
    resolver = InstallResolver(
        ident or identity.current(),
        held=read_holdlist(config.HOLD_FILE),
    )
    result = resolver.run(names, mode)
    return result.exit_code


@handle_errors
def install_files(paths: list[str], ident=None) -> int:
    """
    Install local package archives with `pacman -U`, one at a time.
    Each path is checked right before its own install.
    """
    _require(paths, "package file")
    ident = ident or identity.current()
    for p in paths:
        path = Path(p)
        if not path.is_file():
            e = LocalFileMissing(p)
            logger.error("%s", e)
            err_console.print(f"[bold red]✗[/] {e}")
            return 1
        code = pacman.install_file(path, ident)
        if code != 0:
            return code
    return 0


@handle_errors
def search(query: str, aur_only: bool = False) -> int:
    _require(query, "search term")
    if not aur_only:
        return pacman.search(query)

    pkgs = aur.search(query)
    if not pkgs:
        console.print(f"[yellow]No packages found for[/yellow] {query}")
        return 1

    table = Table(title="[magenta]AUR Results[/magenta]")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Version", style="green")
    table.add_column("Description", style="white")
    for p in pkgs:
        table.add_row(p.name, p.version or "-", p.description or "-")
    console.print(table)
    return 0


@handle_errors
def remove(names: list[str], ident=None) -> int:
    _require(names, "package name")
    return pacman.remove(names, ident or identity.current())


@handle_errors
def reinstall(names: list[str], ident=None) -> int:
    _require(names, "package name")
    return pacman.reinstall(names, ident or identity.current())


@handle_errors
def update(ident=None) -> int:
    return pacman.sync(ident or identity.current())


@handle_errors
def clean(ident=None) -> int:
    return pacman.clean(ident or identity.current())


@handle_errors
def autoremove(ident=None) -> int:
    return pacman.autoremove(ident or identity.current())


@handle_errors
def upgrade(ident=None) -> int:
    held = read_holdlist(config.HOLD_FILE)
    if held:
        console.print(f"[yellow]Holding back:[/yellow] {' '.join(held)}")
    return pacman.upgrade(ident or identity.current(), ignore=held)


@handle_errors
def lock(names: list[str]) -> int:
    _require(names, "package name")
    added = hold(config.HOLD_FILE, names)
    for n in names:
        if n in added:
            console.print(f"[green]✔[/green] {n} locked")
        else:
            console.print(f"[yellow]![/yellow] {n} already locked")
    return 0


@handle_errors
def unlock(names: list[str]) -> int:
    _require(names, "package name")
    dropped = unhold(config.HOLD_FILE, names)
    for n in names:
        if n in dropped:
            console.print(f"[green]✔[/green] {n} unlocked")
        else:
            console.print(f"[yellow]![/yellow] {n} was not locked")
    return 0


@handle_errors
def whatdepends(names: list[str]) -> int:
    _require(names, "package name")
    code = 0
    for n in names:
        required = pacman.field(n, "Required By")
        if required is None:
            err_console.print(f"[red]✗[/red] {n} is not installed")
            code = 1
        elif required == "None":
            console.print(f"[bold]{n}[/bold]: nothing depends on it")
        else:
            console.print(f"[bold]{n}[/bold]: {required}")
    return code


@handle_errors
def homepage(names: list[str]) -> int:
    _require(names, "package name")
    code = 0
    for n in names:
        url = pacman.field(n, "URL", local=False) or pacman.field(n, "URL")
        if url is None:
            rec = aur.info(n)
            url = rec.get("URL") if rec else None
        if not url or url == "None":
            err_console.print(f"[red]✗[/red] no homepage known for {n}")
            code = 1
        else:
            console.print(url)
    return code


@handle_errors
def extract(archives: list[str]) -> int:
    _require(archives, "package file")
    for a in archives:
        if not Path(a).is_file():
            err_console.print(f"[bold red]✗[/] {LocalFileMissing(a)}")
            return 1
        try:
            code = subprocess.run([config.BSDTAR, "-xvf", a]).returncode
        except FileNotFoundError:
            raise BackendMissing(config.BSDTAR)
        if code != 0:
            return code
    return 0


@handle_errors
def log(terms: list[str]) -> int:
    """Lines of the pacman log mentioning any of `terms` (all lines if none)."""
    try:
        lines = config.PACMAN_LOG.read_text(errors="replace").splitlines()
    except FileNotFoundError:
        err_console.print(f"[red]✗[/red] no log at {config.PACMAN_LOG}")
        return 1
    hits = [l for l in lines if not terms or any(t in l for t in terms)]
    for l in hits:
        console.print(l, markup=False, highlight=False)
    return 0 if hits else 1


@handle_errors
def stats() -> int:
    table = Table(title="[cyan]Package statistics[/cyan]", show_header=False)
    table.add_column("What", style="bold")
    table.add_column("Count", style="green", justify="right")
    table.add_row("Installed", str(pacman.count()))
    table.add_row("Explicitly installed", str(pacman.count("e")))
    table.add_row("Foreign (AUR / local)", str(pacman.count("m")))
    table.add_row("Orphans", str(len(pacman.orphan_names())))
    table.add_row("Locked", str(len(read_holdlist(config.HOLD_FILE))))

    if config.PKG_CACHE.is_dir():
        cache = sum(f.stat().st_size for f in config.PKG_CACHE.iterdir() if f.is_file())
        disk = psutil.disk_usage(str(config.PKG_CACHE))
        table.add_row("Package cache", f"{cache / 2**20:.1f} MiB")
        table.add_row("Free on cache disk", f"{disk.free / 2**30:.1f} GiB ({100 - disk.percent:.0f}%)")

    console.print(table)
    return 0


@handle_errors
def version() -> int:
    console.print(f"[bold]unipac[/bold] {__version__}")
    return pacman.version()


# Verbs that are a single pacman call with the arguments passed straight on.
PASSTHROUGH = {
    "info": pacman.info,
    "query": pacman.query,
    "which": pacman.owner,
    "owns": pacman.owner,
    "files": pacman.files,
    "changelog": pacman.changelog,
    "verify": pacman.verify,
}

NO_ARGS = {
    "check": pacman.check,
    "orphans": pacman.orphans,
}


@handle_errors
def passthrough(verb: str, args: list[str]) -> int:
    if verb in NO_ARGS:
        return NO_ARGS[verb]()
    if verb in ("info", "which", "owns", "files"):
        _require(args, "argument")
    return PASSTHROUGH[verb](args)
