"""HomeHub - reservation lifecycle engine for a home services booking platform"""

__version__ = "0.1.0"
