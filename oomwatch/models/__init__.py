# oomwatch/models/__init__.py
