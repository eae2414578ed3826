# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
CareBridge - data access and view state for connecting donors with orphanages.
"""

__version__ = "1.0.0"
