# Routes package init
"""
Social API Backend — API Routes Package
=========================================

Route Inventory:
    - auth.py:       POST /api/register, /api/login, /api/logout
    - profiles.py:   /api/profiles, /api/profiles/{id}
    - posts.py:      /api/posts, /api/posts/{id}
    - comments.py:   /api/comments, /api/comments/{id}
    - likes.py:      POST/DELETE /api/likes
    - followers.py:  POST/DELETE /api/followers
    - files.py:      GET /api/files/{path}
    - health.py:     GET /health

Routes stay thin: read the request, call a service or the resolver,
shape the response. Business rules live in services.
"""
