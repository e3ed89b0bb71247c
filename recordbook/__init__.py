"""
Recordbook — Application Package Initializer
=============================================

What: Marks the `recordbook` directory as a Python package.
Who:  Used by uvicorn (`recordbook.main:app`), pytest, and `python -m recordbook`.

Architecture Note:
    The service follows the same layered shape throughout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← id assignment, presence checks
    ├─────────────────────────────────────┤
    │            Schemas (Data)           │  ← Pydantic records and payloads
    ├─────────────────────────────────────┤
    │        Storage (Persistence)        │  ← one JSON file, read per request
    └─────────────────────────────────────┘

    Routes never touch the file; services never touch HTTP objects.
"""

__version__ = "1.0.0"
