# Routes package init
"""
Recordbook — API Routes Package
================================

Route Inventory:
    - records.py:  GET  /records            (list every record)
                   GET  /records/{id}       (single record)
                   PUT  /records/{id}       (replace a record)
                   POST /save               (create a record)
    - health.py:   GET  /health             (service health check)

Routes stay thin: extract path/body, call RecordService, return the result.
"""
