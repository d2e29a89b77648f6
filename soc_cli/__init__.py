"""
SOC Portal CLI

Client-side session handling: the auth guard run before a page renders and
the activity tracker that expires idle sessions.
"""

__version__ = "1.0.0"
