"""FIFO realized-gain reports from brokerage transaction exports."""

__version__ = "0.1.0"
