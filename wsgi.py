# wsgi.py (at repo root), e.g. ``gunicorn wsgi:app``
from wellnest import create_app

app = create_app()
