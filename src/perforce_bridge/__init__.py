"""perforce-bridge - drive the Perforce client and mirror depot trees locally."""

__version__ = "0.1.0"
