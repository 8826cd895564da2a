class InvalidColorFormat(ValueError):
    """Raised when a hex color string cannot be parsed."""


class InvalidPaletteData(ValueError):
    """Raised when a stored palette document has the wrong shape."""
