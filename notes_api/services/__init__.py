# Services package init
"""
Notes API — Services Layer
============================

Business logic between routes (HTTP) and storage (persistence).

Service Inventory:
    - NoteService: create, list/search/paginate, get, update and delete notes
      over a NoteStorage

Services can be unit-tested without HTTP by handing them an
InMemoryNoteStorage or a JsonFileNoteStorage on a temp path.
"""
