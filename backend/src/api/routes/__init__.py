"""API route handlers for Startup Setu."""

from src.api.routes import auth as auth
from src.api.routes import chat as chat
from src.api.routes import health as health
