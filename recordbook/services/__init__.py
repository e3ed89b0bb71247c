# Services package init
"""
Recordbook — Services Layer
============================

What:  Business logic sitting between routes (HTTP) and storage (the JSON file).

Service Inventory:
    - RecordService: list, get, update and create over the record collection
"""
