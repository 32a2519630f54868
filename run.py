"""
Nearby Medicine Search API - Standalone Entry Point
===================================================
Run this to start the API server independently.

For integration into a parent Flask app, see app/__init__.py for:
  - create_search_blueprint()
  - init_search_module()
  - ensure_tables_exist()
"""
import logging

from app import create_app

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

app = create_app()

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
