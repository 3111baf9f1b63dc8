"""
AdaptWatch - Tender discovery and qualification for adaptation contractors.

Finds published procurement notices for accessibility and home-adaptation
works, filters out noise and expired notices, and scores what is left
against a contractor's capability profile.
"""

__version__ = "0.1.0"
__app_name__ = "adaptwatch"
