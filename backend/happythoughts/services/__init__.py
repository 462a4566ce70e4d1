"""
Happy Thoughts API: Services Layer
==================================

What:  Business logic between the routes (HTTP) and the stores (persistence).

Service Inventory:
    - ThoughtService: list/get/create/update/delete/like with validation
    - CredentialService: register, verify_login, resolve_token
    - AuthGuard: Authorization header → Identity (or 401)
    - can_mutate: the single ownership rule for update and delete
    - translate_query: raw GET /thoughts parameters → ThoughtQuery

Services hold no per-request state; the store they operate on is passed
in on each call.
"""
