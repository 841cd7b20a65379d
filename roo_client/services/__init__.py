# roo_client/services/__init__.py
