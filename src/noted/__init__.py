"""
Noted - personal notes backend

Free-text notes with hashtag tags, markdown rendering, attachments and
live update notifications.
"""

__version__ = "1.0.0"
