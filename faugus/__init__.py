"""Launch engine for Windows games on Linux through umu-run."""

__version__ = "1.4.0"
