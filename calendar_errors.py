"""Exceptions raised by the day picker."""


class ConfigurationError(ValueError):
    """Invalid picker configuration.

    Raised before any month is built: reserved modifier names, malformed
    matchers, inverted month limits and out-of-range options.
    """
