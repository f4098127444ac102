"""Product catalog and user identity services.

This package contains both cooperating services: the product catalog API and
the user management API, plus the shared runtime, persistence and security
infrastructure they are built on.
"""

__version__ = "0.1.0"
