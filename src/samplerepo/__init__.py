"""
samplerepo

Repository-pattern data access over RethinkDB: typed entities, a generic
repository contract, schema migration on connect, and a CLI walkthrough.
"""

from samplerepo.db import ChangeFeedResult, ChangeSubscription, DatabaseRepository
from samplerepo.schema import Schema

__all__ = ["ChangeFeedResult", "ChangeSubscription", "DatabaseRepository", "Schema"]
