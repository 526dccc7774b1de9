# Routes package init
"""
Notes API — Routes Package
============================

Route Inventory:
    - notes.py:   POST   /notes          (create)
                  GET    /notes          (list, paginated + search)
                  GET    /notes/{id}     (get one)
                  PATCH  /notes/{id}     (partial update)
                  DELETE /notes/{id}     (delete, returns the removed note)
    - health.py:  GET    /health         (service health check)

Routes stay thin: take validated input, call one service method, wrap the
result. Business rules live in services, input rules in validation.py.
"""
