"""
Blog API - Services Layer
=========================

Business rules between the routes (HTTP) and the repositories (persistence).
Services take repositories in their constructor, raise BlogError subclasses
and return response schemas.

Service Inventory:
    - AuthService:     login and token issue
    - UserService:     registration, lookup, deletion, admin bootstrap
    - PostService:     post CRUD, search, cascade delete of comments
    - CommentService:  comment CRUD and per-post listing
    - authorization:   the shared ownership rule (author or ADMIN)
"""
