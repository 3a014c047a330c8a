"""
Casbin policy storage backed by a Django-managed relational table.
"""

import os

__version__ = "0.1.0"

ROOT_DIRECTORY = os.path.dirname(os.path.abspath(__file__))
