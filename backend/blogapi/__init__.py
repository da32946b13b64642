"""
Blog API - Application Package Initializer
==========================================

What: Marks the `blogapi` directory as a Python package.
Who:  Used by uvicorn (`blogapi.main:app`), Alembic and pytest.

Architecture Note:
    The backend follows a layered architecture over two independent stores:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Dependencies (Access Guard)       │  ← Bearer token → live User
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Existence + ownership checks
    ├─────────────────────────────────────┤
    │            Repositories             │  ← One per table/collection
    ├──────────────────┬──────────────────┤
    │ Credential store │  Content store   │  ← users | posts, comments
    └──────────────────┴──────────────────┘

    The stores share no foreign keys. Services check cross-store references
    (post author, comment post/author) before writing.
"""

__version__ = "1.0.0"
