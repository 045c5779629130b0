"""
Test suite for the paperdesk project.
"""
