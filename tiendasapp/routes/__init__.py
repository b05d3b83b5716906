# Routes package init
"""
Tiendas Backend — API Routes Package
======================================

Route Inventory:
    - categories.py: GET  /api/categorias
    - stores.py:     POST /api/tiendas
                     GET  /api/tiendas
                     GET  /api/tiendas/categoria/{category}
                     GET  /api/tiendas/{id}
    - reviews.py:    GET  /api/tiendas/{id}/reviews
                     POST /api/tiendas/{id}/reviews
    - health.py:     GET  /health

Routes are THIN: they pull data out of the request, call a service and let
the global exception handlers format failures.
"""
