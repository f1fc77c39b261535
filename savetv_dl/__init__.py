"""
savetv-dl: downloads recordings from the Save.TV video archive.
"""

__version__ = "1.0.0"
