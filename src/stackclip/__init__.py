"""StackClip: a clipboard history stack with pop-and-paste."""

__version__ = "0.1.0"
