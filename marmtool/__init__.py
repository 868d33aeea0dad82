"""marmtool: marmalade marketplace buy tooling."""

__version__ = "0.1.0"
