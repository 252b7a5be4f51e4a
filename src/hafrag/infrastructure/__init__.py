"""Infrastructure layer — member store, templates, manifests, file output.

This layer depends on domain types and third-party libs (SQLAlchemy,
Jinja2). It must never import from services, commands, or output, except
for the small helpers in ``services._helpers``.
"""
