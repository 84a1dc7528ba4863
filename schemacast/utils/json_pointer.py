from __future__ import annotations

from typing import Tuple, Union


PathToken = Union[str, int]
Path = Tuple[PathToken, ...]

ROOT: Path = ()


def jp_escape(token: str) -> str:
    # JSON Pointer escaping: "~" -> "~0", "/" -> "~1"
    return token.replace("~", "~0").replace("/", "~1")


def jp_unescape(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def join_path(base: Path, token: PathToken) -> Path:
    return base + (token,)


def render_pointer(path: Path) -> str:
    """Render *path* as a URI fragment pointer, e.g. ``#/user/emails/0``."""
    return "#" + "".join(f"/{jp_escape(str(token))}" for token in path)


def ref_name(ref: str) -> str:
    """Return the schema name a ``$ref`` points at (its last pointer token)."""
    if "/" not in ref:
        return ref
    return jp_unescape(ref.rsplit("/", 1)[1])
