"""showroom - natural-language vehicle shopping and financing core."""

__version__ = "0.1.0"
