# -*- coding: utf-8 -*-
"""
hushh.stdlib
============

Helpers shared by the Hushh contracts:

- ``access``  owner storage and capability predicates
- ``bands``   score-band table and score validation
- ``token``   token storage keys, event names, argument checks
- ``uint``    checked u256 arithmetic

Submodules are not imported here; use ``from hushh.stdlib import access``.
"""

__all__ = ["access", "bands", "token", "uint"]
