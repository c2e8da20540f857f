# Services package init
"""
BrettAppsCode Backend - Services Layer
========================================

What:  Business logic sitting between routes (HTTP) and the outside world
       (storage directory, upstream AI APIs, process memory).
How:   Each service is a module-level singleton exposed to routes through a
       `get_*` FastAPI dependency.

Service Inventory:
    - FileService:     flat-directory upload/download/read/write/list
    - GatewayService:  dispatch to the upstream chat providers
    - ChatProvider (abstract) with OpenAIChatProvider / GeminiProvider
    - KeyValueStore:   datasheet and databank scratch maps
"""
