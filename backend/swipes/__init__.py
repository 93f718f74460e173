"""
Swipe records.

Responsibilities:
- Store one like/dislike judgment per (group, user, place).
- Replace an earlier judgment when the same member swipes the same place again.
"""
