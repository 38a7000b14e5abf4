"""WSGI entry point (``gunicorn biblio.wsgi:app``)."""

from biblio import create_app

app = create_app()
