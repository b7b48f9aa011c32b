"""
tvdb-sync: keeps a local TheTVDB series metadata cache in step with the remote
database, downloading only what changed since the last successful pass.
"""

__version__ = "1.0.0"
