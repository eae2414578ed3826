# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Services package - the remote backend handle and the signed-in session.
"""

from .supabase import (
    SupabaseService,
    SupabaseConfig,
    SupabaseConfigurationError
)
from .session import SessionContext, SessionStore, NotSignedInError

__all__ = [
    "SupabaseService",
    "SupabaseConfig",
    "SupabaseConfigurationError",
    "SessionContext",
    "SessionStore",
    "NotSignedInError"
]
