"""
Tests for the command layer and the argument dispatcher
"""

import pytest
from pathlib import Path
from unittest.mock import patch, Mock

from unipac import cli, pkgmanager
from unipac.backends.aur import AurPackage
from unipac.resolver import Mode
from unipac.utils.holdlist import read_holdlist, write_holdlist


def run_cli(*argv):
    with pytest.raises(SystemExit) as exc:
        cli.main(list(argv))
    return exc.value.code


class TestLocalFiles:
    def test_missing_file_never_reaches_pacman(self, temp_dir, regular_user):
        with patch("unipac.pkgmanager.pacman.install_file") as install_file:
            code = pkgmanager.install_files([f"{temp_dir}/nope.pkg.tar.zst"], ident=regular_user)

        assert code == 1
        install_file.assert_not_called()

    def test_each_path_checked_before_its_install(self, temp_dir, regular_user):
        good = Path(temp_dir) / "good-1.0-1-x86_64.pkg.tar.zst"
        good.write_bytes(b"\x28\xb5\x2f\xfd")
        missing = Path(temp_dir) / "missing.pkg.tar.zst"

        with patch("unipac.pkgmanager.pacman.install_file", return_value=0) as install_file:
            assert pkgmanager.install_files([str(missing), str(good)], ident=regular_user) == 1
            install_file.assert_not_called()

            assert pkgmanager.install_files([str(good), str(missing)], ident=regular_user) == 1
            install_file.assert_called_once_with(good, regular_user)

    def test_cli_flag(self, temp_dir):
        assert run_cli("install", "-f", f"{temp_dir}/nope.pkg.tar.zst") == 1


class TestSearch:
    def test_official_only(self):
        with patch("unipac.pkgmanager.pacman.search", return_value=0) as official, \
             patch("unipac.pkgmanager.aur.search") as remote:
            assert pkgmanager.search("htop") == 0

        official.assert_called_once_with("htop")
        remote.assert_not_called()

    def test_aur_only(self):
        with patch("unipac.pkgmanager.pacman.search") as official, \
             patch("unipac.pkgmanager.aur.search",
                   return_value=[AurPackage("yay", "AUR helper", "12.3.5-1")]) as remote:
            assert pkgmanager.search("yay", aur_only=True) == 0

        remote.assert_called_once_with("yay")
        official.assert_not_called()

    def test_aur_no_results(self):
        with patch("unipac.pkgmanager.aur.search", return_value=[]):
            assert pkgmanager.search("nothing", aur_only=True) == 1

    def test_cli_flag_selects_aur(self):
        with patch("unipac.pkgmanager.pacman.search") as official, \
             patch("unipac.pkgmanager.aur.search", return_value=[]) as remote:
            run_cli("search", "-a", "yay")

        remote.assert_called_once_with("yay")
        official.assert_not_called()


class TestInstall:
    def test_superuser_aur_install_exits_1(self, superuser, hold_file, build_root):
        with patch("unipac.backends.aurbuild.build_and_install") as build:
            assert pkgmanager.install(["yay"], Mode.AUR_ONLY, ident=superuser) == 1

        build.assert_not_called()

    def test_modes(self, hold_file):
        for verb, mode in [
            ("add", Mode.DEFAULT),
            ("addaur", Mode.AUR_ONLY),
            ("installarch", Mode.OFFICIAL_ONLY),
        ]:
            with patch("unipac.pkgmanager.install", return_value=0) as install:
                assert cli.dispatch(verb, ["htop"]) == 0
            install.assert_called_once_with(["htop"], mode)

    def test_no_packages(self):
        assert run_cli("install") == 1

    def test_held_packages_reach_resolver(self, regular_user, hold_file):
        write_holdlist(hold_file, ["linux"])
        with patch("unipac.pkgmanager.InstallResolver") as resolver:
            resolver.return_value.run.return_value = Mock(exit_code=0)
            pkgmanager.install(["linux"], ident=regular_user)

        assert resolver.call_args[1]["held"] == ["linux"]


class TestHoldList:
    def test_lock_unlock(self, hold_file):
        assert run_cli("lock", "linux", "mesa") == 0
        assert read_holdlist(hold_file) == ["linux", "mesa"]

        assert run_cli("unlock", "linux") == 0
        assert read_holdlist(hold_file) == ["mesa"]

    def test_upgrade_consults_holdlist(self, hold_file, regular_user):
        write_holdlist(hold_file, ["linux"])
        with patch("unipac.pkgmanager.pacman.upgrade", return_value=0) as upgrade:
            assert pkgmanager.upgrade(ident=regular_user) == 0

        upgrade.assert_called_once_with(regular_user, ignore=["linux"])


class TestDispatch:
    def test_unknown_command_exits_0(self):
        assert run_cli("frobnicate") == 0

    def test_help(self):
        assert run_cli("help") == 0
        assert run_cli() == 0

    def test_passthrough_status(self):
        with patch.dict(pkgmanager.PASSTHROUGH, {"files": Mock(return_value=1)}):
            assert run_cli("files", "ghost-package") == 1

    def test_whatdepends(self):
        with patch("unipac.pkgmanager.pacman.field", return_value="glances"):
            assert pkgmanager.whatdepends(["htop"]) == 0
        with patch("unipac.pkgmanager.pacman.field", return_value=None):
            assert pkgmanager.whatdepends(["ghost-package"]) == 1

    def test_log(self, temp_dir, monkeypatch):
        from unipac import config

        log = Path(temp_dir) / "pacman.log"
        log.write_text(
            "[2026-10-01T10:00:00+0000] [ALPM] installed htop (3.3.0-3)\n"
            "[2026-10-01T10:01:00+0000] [ALPM] installed vim (9.1-1)\n"
        )
        monkeypatch.setattr(config, "PACMAN_LOG", log)

        assert pkgmanager.log(["htop"]) == 0
        assert pkgmanager.log(["ghost-package"]) == 1

    def test_extract_uses_configured_bsdtar(self, temp_dir, monkeypatch):
        from unipac import config

        archive = Path(temp_dir) / "htop-3.3.0-3-x86_64.pkg.tar.zst"
        archive.write_bytes(b"\x28\xb5\x2f\xfd")
        monkeypatch.setattr(config, "BSDTAR", "/usr/local/bin/bsdtar")

        with patch("unipac.pkgmanager.subprocess.run", return_value=Mock(returncode=0)) as run:
            assert pkgmanager.extract([str(archive)]) == 0

        run.assert_called_once_with(["/usr/local/bin/bsdtar", "-xvf", str(archive)])
