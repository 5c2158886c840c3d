"""What-Eat-Today: nearby restaurant search, gacha picker and reviews backend."""

__version__ = "1.0.0"
