"""
Fusdle puzzle API.

A FastAPI service that serves the daily emoji puzzle, its hints and answer,
the archive of past puzzles and guess checking from a Firestore collection.
"""
