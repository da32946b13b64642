"""
Blog API - Repositories
=======================

What:  Thin async data-access objects, one per table/collection.
How:   Each repository wraps an AsyncSession and exposes the queries its
       service needs. Repositories return ORM objects or None; turning None
       into NotFoundError is the service's job.
"""
