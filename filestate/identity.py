"""Identity resolution — user/group names to numeric ids and back.

Plain read-only queries against the system identity database. Lookups that
find nothing return None (name → id) or the numeric id as text (id → name).
Names are only ever looked up as names: "0" is a user called "0", not uid 0.
"""

from __future__ import annotations

import grp
import pwd


def uid_for(name: str) -> int | None:
    try:
        return pwd.getpwnam(name).pw_uid
    except KeyError:
        return None


def gid_for(name: str) -> int | None:
    try:
        return grp.getgrnam(name).gr_gid
    except KeyError:
        return None


def user_name(uid: int) -> str:
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return str(uid)


def group_name(gid: int) -> str:
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return str(gid)
