# Routes package init
"""
Products API — Routes Package
===============================

Route Inventory:
    - health.py:    GET /                  (welcome payload)
                    GET /health            (database connectivity)
    - products.py:  GET/POST /products
                    GET/PUT/DELETE /products/{id}

Routes stay thin: parse the request, call validation and the repository,
pick the status code. SQL lives in services/product_repository.py.
"""
