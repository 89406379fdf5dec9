# bkchart/routes/__init__.py
