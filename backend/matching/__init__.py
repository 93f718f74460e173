"""
Group matching engine.

Responsibilities:
- Normalise a group's raw filter configuration into a typed filter.
- Apply hard filters to the place catalogue to find eligible candidates.
- Score candidates with the weighted composite ranking (WCRA) and sort them.
- Aggregate liked swipes into unanimous matches and rank them for confirmation.
"""
