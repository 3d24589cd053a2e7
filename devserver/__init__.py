"""Local development server and build scripts for host-application add-ons."""

__version__ = "1.0.0"
