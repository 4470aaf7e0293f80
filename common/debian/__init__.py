# common/debian/__init__.py
