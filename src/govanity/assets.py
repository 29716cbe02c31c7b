"""Access to stylesheets and templates bundled with the govanity package."""

from importlib.resources import files
from importlib.resources.abc import Traversable


def get_static_dir() -> Traversable:
    """Return the bundled static directory.

    Raises:
        FileNotFoundError: If static assets are not bundled.
    """
    static = files("govanity").joinpath("static")
    if not static.is_dir():
        msg = "Bundled static assets not found. Reinstall the govanity package."
        raise FileNotFoundError(msg)
    return static


def read_static(name: str) -> str:
    """Read a bundled static text file (e.g. "style.css")."""
    return get_static_dir().joinpath(name).read_text(encoding="utf-8")
