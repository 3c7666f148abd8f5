"""
Repositories: Data Access Layer

This package holds the generic repository contract. Each concrete repository
encapsulates all data access for one entity: it knows which table the entity
lives in, how to address a single row, and how to map raw rows back into
typed objects.

Repositories should:
- Provide insert, get_all, update and delete for their entity.
- Contain no business logic, only data access and row/entity mapping.

Example:
    - `SampleEntityRepository`: Stores `SampleEntity` rows in the `SampleEntity`
      table through a connected `DatabaseRepository`.
"""

from samplerepo.repositories.base import Repository

__all__ = ["Repository"]
