"""
PromptShelf Backend — Requirements Constructor
===============================================

What:  Turns the constructor form into a requirements document and keeps a
       hand-edited copy of that document in sync as the form changes.

Module Inventory:
    - fields.py:    FieldKey / FreeTextSection enums and their labels
    - catalog.py:   option lists and backend framework compatibility
    - document.py:  Line / Section / Document model with parse and render
    - generator.py: FormState → Document
    - merge.py:     three-way merge of displayed, new and previous generation
    - editor.py:    EditorSession, the stateful editing surface

Everything here is pure and synchronous; routes call it directly without a
database session.
"""
