"""
ShopSnap Backend - Main Entry Point
A Flask-based API for capturing, organizing and pricing shopping lists.
"""
import os

from shopsnap import create_app
from shopsnap.config import config

app = create_app(config.get(os.environ.get("FLASK_ENV", "default"), config["default"]))


if __name__ == "__main__":
    app.run(debug=app.debug, host='0.0.0.0', port=5000)
