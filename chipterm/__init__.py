"""CHIP-8 emulator that draws its screen in the terminal."""

__version__ = "0.1.0"
__all__ = ["__version__"]