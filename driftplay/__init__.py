"""Signal-driven scatter layouts: clock, scroll and weather variants."""

__version__ = '0.1.0'
