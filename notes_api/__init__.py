"""
Notes API — Application Package Initializer
=============================================

A small REST service for notes (create, list with pagination and keyword
search, get, partial update, delete) persisted in one JSON file.

Architecture Note:
    ┌─────────────────────────────────────┐
    │        Routes (API Layer)           │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │        Validation Pipeline          │  ← Rejects bad input early
    ├─────────────────────────────────────┤
    │     Services (Business Logic)       │  ← Ids, timestamps, search, paging
    ├─────────────────────────────────────┤
    │     Models & Schemas (Data)         │  ← Pydantic
    ├─────────────────────────────────────┤
    │     Storage (Persistence)           │  ← One JSON document, aiofiles
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
