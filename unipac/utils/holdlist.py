from pathlib import Path


def read_holdlist(path: Path) -> list[str]:
    """
    Return held package names in file order. A missing file is an empty list.
    """
    try:
        lines = path.read_text().splitlines()
    except FileNotFoundError:
        return []
    return [l.strip() for l in lines if l.strip() and not l.startswith("#")]


def write_holdlist(path: Path, names: list[str]):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{n}\n" for n in names))


def hold(path: Path, names: list[str]) -> list[str]:
    """Append names not already held. Returns the ones that were added."""
    held = read_holdlist(path)
    added = [n for n in dict.fromkeys(names) if n not in held]
    if added:
        write_holdlist(path, held + added)
    return added


def unhold(path: Path, names: list[str]) -> list[str]:
    """Drop names from the list. Returns the ones that were actually held."""
    held = read_holdlist(path)
    dropped = [n for n in held if n in names]
    if dropped:
        write_holdlist(path, [n for n in held if n not in names])
    return dropped
