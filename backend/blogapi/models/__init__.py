"""
Blog API - ORM Models
=====================

Credential store (Base):      user.User, user.UserRole
Content store (ContentBase):  post.Post, comment.Comment
"""
