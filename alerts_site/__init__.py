"""
Django project hosting the sitewide alerts app.
"""
