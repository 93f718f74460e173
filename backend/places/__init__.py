"""
Place catalogue.

Responsibilities:
- Load the canonical place dataset into an in-memory DataFrame.
- Look up single places and toggle their active flag.
- Serve the category browse mode (OR matching, three-factor score).
"""
