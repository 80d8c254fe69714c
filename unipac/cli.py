#!/usr/bin/env python3
# unipac/cli.py
import sys
import signal
import logging
import argparse

from rich.console import Console

from unipac import __version__, pkgmanager
from unipac.resolver import Mode

console = Console()

USAGE = f"""\
[bold]unipac[/bold] {__version__}: one front end for pacman and the AUR

[bold]Usage:[/bold] unipac <command> [OPTIONS] [PACKAGE...]

[bold cyan]Installing[/bold cyan]
  install, add          install from official repos, fall back to AUR
  install -f FILE...    install local package archives
  installaur, addaur    install from AUR only
  installarch, addarch  install from official repos only
  reinstall             reinstall packages
  remove, delete        remove packages and unneeded dependencies
  autoremove            remove orphaned dependencies

[bold cyan]Updating[/bold cyan]
  update                refresh package databases
  upgrade               upgrade the system (locked packages are skipped)
  lock, unlock          add or remove packages on the hold-list

[bold cyan]Querying[/bold cyan]
  search [-a] TERM      search official repos, or AUR with -a
  info, query           package details / installed packages
  which, owns PATH      package owning a file
  files                 files installed by a package
  orphans               orphaned dependencies
  whatdepends           installed packages requiring a package
  changelog, homepage   changelog / upstream URL
  log [TERM...]         matching lines of the pacman log
  stats                 package statistics

[bold cyan]Maintenance[/bold cyan]
  clean                 clean the package cache
  check, verify         check database / package files
  extract FILE          unpack a package archive here
  version, help
"""


class RichParser(argparse.ArgumentParser):
    def error(self, message):
        console.print(f"[bold red]Error:[/] {message}\n")
        console.print(USAGE)
        sys.exit(2)


def parse_args(argv=None):
    parser = RichParser(prog="unipac", add_help=False, allow_abbrev=False)
    parser.add_argument("command", nargs="?", default="help")
    parser.add_argument("args", nargs="*")
    parser.add_argument("-f", "--file", action="store_true", help="Install local package files")
    parser.add_argument("-a", "--aur", action="store_true", help="Search the AUR")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-h", "--help", action="store_true")
    return parser.parse_intermixed_args(argv)


def _terminate(signum, frame):
    # unwinds through every `finally`, so build workspaces are removed
    raise SystemExit(128 + signum)


def dispatch(cmd: str, args: list[str], file: bool = False, aur: bool = False) -> int:
    if cmd in ("install", "add"):
        if file:
            return pkgmanager.install_files(args)
        return pkgmanager.install(args, Mode.DEFAULT)
    if cmd in ("installaur", "addaur"):
        return pkgmanager.install(args, Mode.AUR_ONLY)
    if cmd in ("installarch", "addarch"):
        return pkgmanager.install(args, Mode.OFFICIAL_ONLY)
    if cmd in ("remove", "delete"):
        return pkgmanager.remove(args)
    if cmd == "reinstall":
        return pkgmanager.reinstall(args)
    if cmd == "update":
        return pkgmanager.update()
    if cmd == "upgrade":
        return pkgmanager.upgrade()
    if cmd == "clean":
        return pkgmanager.clean()
    if cmd == "autoremove":
        return pkgmanager.autoremove()
    if cmd == "search":
        return pkgmanager.search(" ".join(args), aur_only=aur)
    if cmd == "lock":
        return pkgmanager.lock(args)
    if cmd == "unlock":
        return pkgmanager.unlock(args)
    if cmd == "whatdepends":
        return pkgmanager.whatdepends(args)
    if cmd == "homepage":
        return pkgmanager.homepage(args)
    if cmd == "extract":
        return pkgmanager.extract(args)
    if cmd == "log":
        return pkgmanager.log(args)
    if cmd == "stats":
        return pkgmanager.stats()
    if cmd == "version":
        return pkgmanager.version()
    if cmd == "help":
        console.print(USAGE)
        return 0
    if cmd in pkgmanager.PASSTHROUGH or cmd in pkgmanager.NO_ARGS:
        return pkgmanager.passthrough(cmd, args)

    console.print(f"[bold red]Unknown command:[/] {cmd}")
    console.print("Run [cyan]unipac help[/cyan] to see the available commands.")
    return 0


def main(argv=None):
    args = parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    signal.signal(signal.SIGTERM, _terminate)
    signal.signal(signal.SIGHUP, _terminate)

    cmd = "help" if args.help else args.command
    try:
        code = dispatch(cmd, args.args, file=args.file, aur=args.aur)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
