# chainloom/logging/__init__.py
