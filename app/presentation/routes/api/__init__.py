"""
JSON API blueprints, mounted under /api by app.presentation.routes.init_app
"""
