"""
utils package
-------------

Contains utility modules used throughout the scheduling application.

Includes helpers for parsing configuration constants, data processing, validation, formatting, and other shared logic.
"""
