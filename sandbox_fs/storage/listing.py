"""Directory listing lines built from the file system metadata view."""

from datetime import datetime, timedelta, timezone
from typing import Optional, TypeVar

from sandbox_fs.domain.permissions import (
    CAT_OWNER,
    TYPE_EXECUTE,
    TYPE_READ,
    TYPE_WRITE,
)
from sandbox_fs.storage.base import FileSystem

HandleT = TypeVar("HandleT")

MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
RECENT_WINDOW = timedelta(days=183)


def _list_timestamp(modified: datetime, now: datetime) -> str:
    month = MONTHS[modified.month - 1]
    if abs(now - modified) < RECENT_WINDOW:
        return f"{month} {modified.day:02d} {modified.hour:02d}:{modified.minute:02d}"
    return f"{month} {modified.day:02d}  {modified.year}"


def format_list_entry(
    fs: FileSystem[HandleT], handle: HandleT, now: Optional[datetime] = None
) -> str:
    """Render ``handle`` as an ``ls -l`` line for LIST responses.

    Entries modified within roughly six months of ``now`` show the time of
    day, older ones show the year.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    mode = fs.get_permissions(handle).to_mode_string(fs.is_directory(handle))
    timestamp = _list_timestamp(fs.get_last_modified(handle), now)
    return (
        f"{mode} {fs.get_hard_links(handle):>3} "
        f"{fs.get_owner(handle):<8} {fs.get_group(handle):<8} "
        f"{fs.get_size(handle):>12} {timestamp} {fs.get_name(handle)}"
    )


def _perm_fact(fs: FileSystem[HandleT], handle: HandleT, is_directory: bool) -> str:
    permissions = fs.get_permissions(handle)
    readable = permissions.has(CAT_OWNER, TYPE_READ)
    writable = permissions.has(CAT_OWNER, TYPE_WRITE)
    letters = ""
    if is_directory:
        if permissions.has(CAT_OWNER, TYPE_EXECUTE):
            letters += "e"
        if readable:
            letters += "l"
        if writable:
            letters += "cdfmp"
    else:
        if readable:
            letters += "r"
        if writable:
            letters += "adfw"
    return letters


def format_facts(fs: FileSystem[HandleT], handle: HandleT) -> str:
    """Render ``handle`` as a machine-readable MLSD/MLST entry."""
    is_directory = fs.is_directory(handle)
    modified = fs.get_last_modified(handle).astimezone(timezone.utc)
    facts = [
        f"type={'dir' if is_directory else 'file'}",
        f"size={fs.get_size(handle)}",
        f"modify={modified.strftime('%Y%m%d%H%M%S')}",
        f"perm={_perm_fact(fs, handle, is_directory)}",
    ]
    return ";".join(facts) + "; " + fs.get_name(handle)
