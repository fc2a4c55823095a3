# -*- coding: utf-8 -*-
"""
EventNest: campus event management (registrations, check-in and certificates).
"""

__version__ = "1.0.0"
