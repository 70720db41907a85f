# Services package init
"""
Social API Backend — Services Layer
=====================================

What:  Business logic between routes (HTTP) and the database.
How:   Stateless singletons; every method receives the request's
       AsyncSession and, for mutations, the acting Actor.

Service Inventory:
    - access_gate:            Actor type and authorization decisions
    - auth_service:           register / login / logout / token → Actor
    - profile_service:        profile mutations with cascade delete
    - post_service:           post mutations, image upload
    - comment_service:        comment mutations
    - like_service:           like (first-or-create) / unlike
    - follower_service:       follow (first-or-create) / unfollow
    - relationship_resolver:  read views with embedded related entities
    - file_service:           upload validation, storage, path resolution
    - store:                  get-or-404, reference checks, first-or-create
"""
