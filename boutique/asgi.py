"""
ASGI entrypoint: expose `app` pour les process managers / déploiements
(ex: uvicorn boutique.asgi:app, gunicorn -k uvicorn.workers.UvicornWorker).
"""
from boutique.app_setup.factory import create_app

app = create_app()
