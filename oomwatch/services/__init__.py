# oomwatch/services/__init__.py
