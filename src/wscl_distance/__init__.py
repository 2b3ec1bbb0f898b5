"""wscl-distance - Travel distances for WSCL teams.

Geocodes team home bases and event venues, measures driving distance with
Google Maps, and combines it with attendance to estimate how far teams
travelled to races.
"""

from .cli import main

__all__ = ["main"]
