# unipac/resolver.py

import enum
import logging
import time
from dataclasses import dataclass, field

from rich.console import Console

from unipac import config
from unipac.backends import pacman, aur, aurbuild
from unipac.utils.errors import (
    NotFound,
    TransportError,
    InstallError,
    CloneError,
    BuildError,
    PrivilegeError,
    err_console,
)
from unipac.utils.identity import Identity

logger = logging.getLogger(__name__)
console = Console()


class Mode(enum.Enum):
    DEFAULT = "default"
    AUR_ONLY = "aur"
    OFFICIAL_ONLY = "official"


class Outcome(enum.Enum):
    INSTALLED_OFFICIAL = "installed from official repositories"
    INSTALLED_AUR = "installed from AUR"
    HELD = "held, skipped"
    NOT_FOUND = "not found"
    INSTALL_FAILED = "install failed"
    BUILD_FAILED = "build failed"
    TRANSPORT_FAILED = "AUR unreachable"
    PRIVILEGE_DENIED = "refused: AUR builds cannot run as root"

    @property
    def failed(self) -> bool:
        return self not in (
            Outcome.INSTALLED_OFFICIAL,
            Outcome.INSTALLED_AUR,
            Outcome.HELD,
        )


# Outcomes that stop the rest of the batch. Anything else is reported and
# the next package is tried.
ABORT_ON = {
    Mode.DEFAULT: {Outcome.PRIVILEGE_DENIED},
    Mode.AUR_ONLY: {Outcome.PRIVILEGE_DENIED},
    Mode.OFFICIAL_ONLY: {Outcome.NOT_FOUND, Outcome.INSTALL_FAILED},
}


@dataclass
class BatchResult:
    outcomes: list[tuple[str, Outcome]] = field(default_factory=list)
    aborted: bool = False

    @property
    def ok(self) -> bool:
        return not self.aborted and not any(o.failed for _, o in self.outcomes)

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


class InstallResolver:
    """
    Decides per package whether pacman or the AUR installs it.

    Backends are injected so the whole decision tree can be driven without
    touching the system; by default they are the real modules.
    """

    def __init__(
        self,
        ident: Identity,
        official=pacman,
        directory=aur,
        builder=aurbuild,
        held=(),
        retries: int = None,
        retry_delay: float = None,
        sleep=time.sleep,
    ):
        self.ident = ident
        self.official = official
        self.directory = directory
        self.builder = builder
        self.held = set(held)
        self.retries = config.RETRIES if retries is None else retries
        self.retry_delay = config.RETRY_DELAY if retry_delay is None else retry_delay
        self._sleep = sleep

    def run(self, names: list[str], mode: Mode = Mode.DEFAULT) -> BatchResult:
        result = BatchResult()
        for name in names:
            outcome = self.resolve(name, mode)
            result.outcomes.append((name, outcome))
            self._report(name, outcome)
            if outcome in ABORT_ON[mode]:
                result.aborted = True
                remaining = names[len(result.outcomes):]
                if remaining:
                    console.print(f"[red]Aborting; not attempted:[/red] {' '.join(remaining)}")
                break
        return result

    def resolve(self, name: str, mode: Mode = Mode.DEFAULT) -> Outcome:
        if name in self.held:
            return Outcome.HELD

        if mode is not Mode.AUR_ONLY:
            try:
                self.official.install(name, self.ident)
                return Outcome.INSTALLED_OFFICIAL
            except NotFound:
                logger.debug("%s not in official repositories", name)
                if mode is Mode.OFFICIAL_ONLY:
                    return Outcome.NOT_FOUND
            except InstallError as e:
                logger.error("%s", e)
                return Outcome.INSTALL_FAILED

        return self._try_aur(name)

    def _check_privilege(self, name: str):
        if self.ident.is_superuser:
            raise PrivilegeError(
                f"refusing to build {name} from AUR as {self.ident.user}"
            )

    def _try_aur(self, name: str) -> Outcome:
        try:
            self._check_privilege(name)
        except PrivilegeError as e:
            logger.error("%s", e)
            return Outcome.PRIVILEGE_DENIED

        attempts = self.retries + 1
        for attempt in range(1, attempts + 1):
            try:
                self.builder.build_and_install(name, directory=self.directory)
                return Outcome.INSTALLED_AUR
            except TransportError as e:
                logger.warning("%s (attempt %d/%d)", e, attempt, attempts)
                if attempt < attempts:
                    self._sleep(self.retry_delay)
            except NotFound:
                return Outcome.NOT_FOUND
            except (CloneError, BuildError) as e:
                logger.error("%s", e)
                return Outcome.BUILD_FAILED
        return Outcome.TRANSPORT_FAILED

    def _report(self, name: str, outcome: Outcome):
        if outcome is Outcome.PRIVILEGE_DENIED:
            err_console.print(
                f"[bold red]✗ {name}:[/] {outcome.value}. Run unipac as a regular user."
            )
        elif outcome.failed:
            console.print(f"[red]✗ {name}:[/red] {outcome.value}")
        elif outcome is Outcome.HELD:
            console.print(f"[yellow]! {name}:[/yellow] {outcome.value}")
        else:
            console.print(f"[green]✔ {name}:[/green] {outcome.value}")
