# unipac/backends/aur.py

import logging
from dataclasses import dataclass

import requests

from unipac import __version__, config
from unipac.utils.errors import TransportError

logger = logging.getLogger(__name__)

session = requests.Session()
session.headers["User-Agent"] = f"unipac/{__version__}"


@dataclass
class AurPackage:
    name: str
    description: str = ""
    version: str = ""


def _rpc(params: dict) -> dict:
    """
    GET the AUR RPC endpoint and return the decoded reply.

    Anything that keeps us from reading a well-formed reply raises
    TransportError. An empty list means the AUR genuinely has nothing.
    """
    params = {"v": 5, **params}
    try:
        r = session.get(config.AUR_RPC_URL, params=params, timeout=config.HTTP_TIMEOUT)
        r.raise_for_status()
        data = r.json()
    except requests.exceptions.RequestException as e:
        raise TransportError(f"AUR request failed: {e}") from e
    except ValueError as e:
        raise TransportError(f"AUR sent malformed JSON: {e}") from e

    if not isinstance(data, dict):
        raise TransportError("AUR sent an unexpected reply")
    if data.get("type") == "error":
        raise TransportError(f"AUR error: {data.get('error', 'unknown')}")

    data["results"] = data.get("results") or []
    logger.debug("AUR %s → %d result(s)", params, len(data["results"]))
    return data


def search(query: str) -> list[AurPackage]:
    return [
        AurPackage(
            name=r.get("Name", ""),
            description=r.get("Description") or "",
            version=r.get("Version", ""),
        )
        for r in _rpc({"type": "search", "arg": query})["results"]
    ]


def info(name: str) -> dict | None:
    """
    Return the RPC record for exactly `name`, or None if the AUR has no such
    package.
    """
    data = _rpc({"type": "info", "arg[]": name})
    results = data["results"]
    if data.get("resultcount", len(results)) <= 0 or not results:
        return None
    for r in results:
        if r.get("Name") == name:
            return r
    return results[0]


def exists(name: str) -> bool:
    return info(name) is not None
