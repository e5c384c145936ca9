"""
API blueprint for ShopSnap Backend
"""
from flask import Blueprint

api_bp = Blueprint("api", __name__)

from shopsnap.api import routes  # noqa: E402,F401
