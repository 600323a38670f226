"""YAML-powered shortcut launcher for Karabiner-Elements on macOS."""

__version__ = "0.1.0"
__all__ = ["__version__"]