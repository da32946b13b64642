"""
Blog API - Routes Package
=========================

Thin HTTP handlers: parse the request, call a service, return its response.

Route Inventory:
    - auth.py:      POST /api/auth/login
    - users.py:     /api/users/register, /api/users/{id}
    - posts.py:     /api/posts, /api/posts/{id}
    - comments.py:  /api/comments, /api/comments/{id}, /api/posts/{postId}/comments
    - health.py:    GET /health
"""
