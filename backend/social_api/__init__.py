"""
Social API Backend — Application Package
==========================================

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Dependencies (bearer → Actor)      │
    ├─────────────────────────────────────┤
    │  Services                           │  ← Access Gate, store mutations,
    │                                     │    Relationship Resolver (reads)
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
