"""Django project configuration for the Vista marketplace.

Holds the settings modules for each environment, the root URLConf and
the WSGI/ASGI entry points.
"""
