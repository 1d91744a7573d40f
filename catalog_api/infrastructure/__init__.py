"""Infrastructure Layer — IO adapters: database, credentials, logging.

Invariants:
    - Adapters implement the contracts core/ and services/ consume
    - No route logic here
"""
