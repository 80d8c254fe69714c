import functools
import logging
import sys

from rich.console import Console

logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

err_console = Console(stderr=True)


class UnipacError(Exception):
    """Base class for every failure unipac reports to the user."""


class NotFound(UnipacError):
    def __init__(self, name: str, source: str):
        super().__init__(f"{name}: not found in {source}")
        self.name = name
        self.source = source


class TransportError(UnipacError):
    """The AUR RPC could not be reached or sent back garbage."""


class InstallError(UnipacError):
    pass


class CloneError(UnipacError):
    pass


class BuildError(UnipacError):
    pass


class PrivilegeError(UnipacError):
    pass


class LocalFileMissing(UnipacError):
    def __init__(self, path):
        super().__init__(f"File not found: {path}")
        self.path = path


class BackendMissing(UnipacError):
    def __init__(self, tool: str):
        super().__init__(f"required tool not found on PATH: {tool}")
        self.tool = tool


def handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SystemExit:
            raise
        except Exception as e:
            logging.error(f"{func.__name__} ▶ {e}")
            err_console.print(f"[bold red]✗[/] {func.__name__} failed: {e}")
            sys.exit(1)

    return wrapper
