"""Game domain: value types, consistency rules, optimistic locking and
statistics.

This package holds the logic that does not depend on how games are stored or
served. ``gamestats.services`` maps it onto the database records.
"""
