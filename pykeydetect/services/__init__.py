"""
pykeydetect.services.

~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2025-present hexguard
:license: MIT, see LICENSE for more details.

``pkcs11_service`` needs the ``pkcs11`` extra and is imported explicitly.
"""

from .prompt_service import *
from .sort_service import *
