"""
RAM - Source Package

A small personal tracker for debts owed to you and the website
credentials you keep, with the credentials list locked behind
biometric (or passcode) authentication.

DESIGN PRINCIPLES:
1. Every mutation is persisted immediately
2. Credentials are only shown to an authenticated user
3. Failures at the edges degrade to a safe default, never a crash
4. Every significant step is logged
5. Storage and authentication backends are swappable
"""

__version__ = "1.0.0"
__author__ = "RAM Team"
