"""
Userboard: single-page admin dashboard for browsing and managing user records.
"""

__version__ = "1.0.0"
