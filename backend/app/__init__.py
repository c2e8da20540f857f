"""
BrettAppsCode Backend - Application Package
=============================================

What: The server half of the BrettAppsCode browser editor.
Who:  Imported by uvicorn (`app.main:app`), pytest, and the route modules.

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← file store, AI gateway, KV stores
    ├─────────────────────────────────────┤
    │             Schemas (Data)          │  ← Pydantic request/response models
    ├─────────────────────────────────────┤
    │   Storage root / upstream AI APIs   │  ← filesystem, outbound HTTPS
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
