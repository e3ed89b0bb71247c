# Schemas package init
"""
Recordbook — Pydantic Schemas
==============================

What:  The record shape stored on disk and the request/response contracts.
"""
