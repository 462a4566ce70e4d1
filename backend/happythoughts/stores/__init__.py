"""
Happy Thoughts API: Storage Layer
=================================

What:  The document-store contract the services depend on, and its
       SQLAlchemy implementation.

Store Inventory:
    - ThoughtStore (abstract): find/count with filter, sort, skip/limit;
      insert; update-by-id; delete-by-id; atomic hearts increment
    - UserStore (abstract): insert with unique username, lookup by
      username, lookup by access token
    - SqlThoughtStore / SqlUserStore: async SQLAlchemy implementations
      bound to one request's session

Services only see the abstract classes, so the engine behind them
(PostgreSQL, SQLite, a document database) can change without touching
query, ownership or credential logic.
"""
