"""Translation between filesystem visibility labels and object ACLs."""

from typing import Any, Iterable, Mapping

VISIBILITY_PUBLIC = "public"
VISIBILITY_PRIVATE = "private"

ACL_PRIVATE = "private"
ACL_PUBLIC_READ = "public-read"
ACL_PUBLIC_READ_WRITE = "public-read-write"
ACL_AUTHENTICATED_READ = "authenticated-read"

VISIBILITY_PUBLIC_READ_WRITE = ACL_PUBLIC_READ_WRITE

ALL_USERS_URI = "http://acs.amazonaws.com/groups/global/AllUsers"
AUTHENTICATED_USERS_URI = "http://acs.amazonaws.com/groups/global/AuthenticatedUsers"


def visibility_to_acl(visibility: str) -> str:
    """Map a visibility label to the canned ACL sent to the provider."""
    if visibility == VISIBILITY_PUBLIC:
        return ACL_PUBLIC_READ
    return visibility


def acl_to_visibility(acl: str) -> str:
    """Map a canned ACL reported by the provider back to a visibility label."""
    if acl == ACL_PUBLIC_READ:
        return VISIBILITY_PUBLIC
    return acl


def grants_to_acl(grants: Iterable[Mapping[str, Any]]) -> str:
    """Collapse an S3 grant list into the closest canned ACL.

    S3 returns the expanded grant list from ``GetObjectAcl`` rather than the
    canned label the object was written with, so the group grants are
    inspected to recover it. Owner grants are ignored.
    """
    group_permissions: dict[str, set[str]] = {}
    for grant in grants:
        grantee = grant.get("Grantee") or {}
        if grantee.get("Type") != "Group":
            continue
        group_permissions.setdefault(grantee.get("URI", ""), set()).add(
            grant.get("Permission", "")
        )

    everyone = group_permissions.get(ALL_USERS_URI, set())
    if "FULL_CONTROL" in everyone or {"READ", "WRITE"} <= everyone:
        return ACL_PUBLIC_READ_WRITE
    if "READ" in everyone:
        return ACL_PUBLIC_READ
    if "READ" in group_permissions.get(AUTHENTICATED_USERS_URI, set()):
        return ACL_AUTHENTICATED_READ
    return ACL_PRIVATE
