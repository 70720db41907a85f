"""
Social API Backend — Pydantic Request/Response Schemas
=======================================================

What:  API contracts, kept separate from the SQLAlchemy models so that
       internal columns (password_hash, token_hash) can never leak into a
       response by accident.

Modules:
    - common.py:   errors, messages, health, summaries, form validation helper
    - auth.py:     register / login / user
    - profile.py:  profile CRUD and the profile view
    - post.py:     post CRUD and the post view
    - comment.py:  comment CRUD and the comment view
    - relation.py: likes and follower edges
"""
