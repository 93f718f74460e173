"""
Group lifecycle.

Responsibilities:
- Create groups with a unique join code and a single host.
- Join, start, confirm a final place, leave and delete.
- Enforce membership, host-only operations and the member cap.
"""
