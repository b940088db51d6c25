# oomwatch/core/__init__.py
