# Middleware package init
"""
Tiendas Backend — Middleware Package
======================================

Middleware Chain (order matters!):
    Request → [CORS] → [Logging] → [Security Headers] → [Body Size Limit] → [GZip] → Route

    1. CORS FIRST: every response carries CORS headers, the 413 included,
       so browsers see the real error instead of a CORS failure
    2. Logging: every request is logged, including ones rejected below
    3. Security headers: applied to every response, errors included
    4. Body size limit: oversized requests never finish form/JSON parsing
"""
