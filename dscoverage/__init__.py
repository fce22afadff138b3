"""Design system coverage scanner."""

__version__ = "0.1.0"
