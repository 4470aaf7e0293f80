# common/__init__.py
