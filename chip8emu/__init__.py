"""CHIP-8 interpreter: core processor model plus a pygame front end."""

__version__ = "1.0.0"
