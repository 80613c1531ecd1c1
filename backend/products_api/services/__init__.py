# Services package init
"""
Products API — Services Layer
===============================

Service Inventory:
    - validation: pure field-rule checks returning violations
    - ProductRepository: parameterized SQL for the products table

Both are stateless; the repository receives the request's session on every
call, so a single module-level instance serves all requests.
"""
