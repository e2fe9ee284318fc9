from collections.abc import Callable
from pathlib import Path


def _candidate_name(name: str, counter: int, split_extension: bool) -> str:
    if split_extension:
        stem, dot, extension = name.rpartition(".")
        if dot and stem:
            return f"{stem} ({counter}).{extension}"
    return f"{name} ({counter})"


def resolve_destination(
    desired: Path,
    exists: Callable[[Path], bool] = Path.exists,
    split_extension: bool = True,
) -> Path:
    """Return ``desired`` or the first ``"<stem> (n).<ext>"`` sibling that does not exist.

    With ``split_extension`` off the counter goes after the whole name, which
    is how folders are renamed.
    """
    if not exists(desired):
        return desired

    counter = 1
    while True:
        candidate = desired.with_name(_candidate_name(desired.name, counter, split_extension))
        if not exists(candidate):
            return candidate
        counter += 1
