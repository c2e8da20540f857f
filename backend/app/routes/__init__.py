# Routes package init
"""
BrettAppsCode Backend - API Routes Package
============================================

Route Inventory:
    - files.py:      POST /api/upload, GET /api/download/{filename},
                     GET /api/read/{filename}, POST /api/write, GET /api/files
    - gateway.py:    POST /api/gateway
    - datastore.py:  /api/datasheet and /api/databank
    - health.py:     GET /health

Routes stay thin: pull data out of the request, call a service, shape the
response. Failures are raised, never returned.
"""
