"""ACL grant/revoke for the web server identity."""

from .grantor import PermissionGrantor, grant_chain

__all__ = ["PermissionGrantor", "grant_chain"]
