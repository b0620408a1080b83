"""
slotfinder - Resolve bookable meeting times from weekly availability and calendar busy times.
"""

__version__ = "0.1.0"
