"""ral: a resource abstraction layer.

Resources on a host (users, packages, files, ...) are managed through
providers. Providers implemented as external scripts talk to ral using a
small JSON protocol.
"""

__version__ = "0.1.0"
