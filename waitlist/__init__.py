"""Teed.club beta waitlist: application scoring and capacity gating."""

__version__ = "2.0.0"
