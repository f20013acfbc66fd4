"""
Recommendations Module Summary
==============================

Suggests places to a user from what the rest of the community has saved.

1. Preference weights come from the place types the user saved most
2. Candidates are places of those types saved by other users
3. ScoringService ranks them by weight, rating and price level match
"""
