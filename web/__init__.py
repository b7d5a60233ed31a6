"""
Web surface: landing pages and JSON API for inbound links.
"""
