"""
Happy Thoughts API: Routes Package
==================================

Route Inventory:
    - index.py:    GET  /                      (welcome + endpoint listing)
    - thoughts.py: GET/POST /thoughts, GET/PATCH/PUT/DELETE /thoughts/{id},
                   POST /thoughts/{id}/like
    - auth.py:     POST /register, POST /login
    - health.py:   GET  /health

Routes stay thin: extract parameters, resolve dependencies, call a service,
set headers. Business rules live in `happythoughts.services`.
"""
