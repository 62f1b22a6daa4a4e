# Routes package init
"""
PromptShelf Backend — API Routes Package
=========================================

Route Inventory:
    - prompts.py:       /api/prompts        (library CRUD, export, refine, analyze)
    - notes.py:         /api/notes          (scratch notes, pins, colors, folders)
    - requirements.py:  /api/requirements   (options, generate, merge)
    - health.py:        /health

Routes stay thin: they parse the request, call a service or the
constructor, and return a schema. Errors are raised, never formatted here;
the handlers in main.py turn them into JSON.
"""
