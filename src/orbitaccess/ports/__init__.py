# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interfaces for external collaborators.

Adapters implement these to plug in access engines.
"""
from orbitaccess.ports.access_source import AccessSource

__all__ = ["AccessSource"]
