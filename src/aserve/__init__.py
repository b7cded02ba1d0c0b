"""
aserve - temporary, reversible publishing of a local directory

aserve bind-mounts a directory into a running web server's document root,
grants the server the minimum ACLs it needs to read it, and tears the
publish down again on interrupt or on an explicit ``clean``.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
