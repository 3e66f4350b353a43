"""chesslink: adapters for chess engines speaking UCI or Xboard."""

__version__ = "0.1.0"
