""".NET SDK buildpack — resolve, cache, install and restore for staged apps."""

__version__ = "0.1.0"
