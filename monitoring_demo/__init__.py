"""Monitoring demo service.

Each backend route opens a connection to an external datastore, performs a
burst of trivial writes and redirects back to the index page. Used to put
observable load on platform services during monitoring demos.
"""

__version__ = "1.0.0"
