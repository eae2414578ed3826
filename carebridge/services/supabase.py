# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Supabase service layer: the single long-lived handle to the hosted backend.

Repositories reach tables, auth and storage through this handle. It carries no
per-user state beyond what the underlying client keeps for its auth session.
"""

import os
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from supabase import Client, create_client

logger = logging.getLogger(__name__)


class SupabaseConfigurationError(Exception):
    """Raised when the backend URL or key is missing."""
    pass


@dataclass
class SupabaseConfig:
    """Supabase connection settings."""
    url: str
    key: str
    storage_bucket: str = "donation-photos"
    password_reset_redirect_url: Optional[str] = None

    @classmethod
    def from_env(cls) -> "SupabaseConfig":
        """Build configuration from environment variables."""
        return cls(
            url=os.getenv('SUPABASE_URL', ''),
            key=os.getenv('SUPABASE_ANON_KEY') or os.getenv('SUPABASE_KEY', ''),
            storage_bucket=os.getenv('SUPABASE_STORAGE_BUCKET', 'donation-photos'),
            password_reset_redirect_url=os.getenv('PASSWORD_RESET_REDIRECT_URL') or None,
        )

    def validate(self) -> None:
        """Ensure required settings are present."""
        missing = [name for name, value in (("SUPABASE_URL", self.url), ("SUPABASE_ANON_KEY", self.key)) if not value]
        if missing:
            raise SupabaseConfigurationError(f"Missing Supabase configuration: {', '.join(missing)}")


class SupabaseService:
    """Lazily created Supabase client shared by every repository."""

    def __init__(self, config: Optional[SupabaseConfig] = None, client: Optional[Client] = None):
        """
        Initialize the service.

        Args:
            config: Connection settings, read from the environment when omitted
            client: Pre-built client, used as-is (tests pass a fake here)
        """
        self.config = config or SupabaseConfig.from_env()
        self._client = client

        logger.info(f"Supabase service initialized for: {self.config.url or '<unset>'}")

    @property
    def client(self) -> Client:
        """Get the Supabase client, creating it on first use."""
        if self._client is None:
            self.config.validate()
            try:
                self._client = create_client(self.config.url, self.config.key)
                logger.info("Supabase client created successfully")
            except Exception as e:
                logger.error(f"Failed to create Supabase client: {e}")
                raise

        return self._client

    def table(self, name: str) -> Any:
        """Get a query builder for a table."""
        return self.client.table(name)

    @property
    def auth(self) -> Any:
        """Get the auth sub-client."""
        return self.client.auth

    def bucket(self, name: Optional[str] = None) -> Any:
        """Get a storage bucket, the configured one by default."""
        return self.client.storage.from_(name or self.config.storage_bucket)

    def close_connection(self) -> None:
        """Drop the client; the next access creates a new one."""
        if self._client is not None:
            self._client = None
            logger.info("Supabase client released")

    def health_check(self) -> Dict[str, Any]:
        """Check that the backend answers a trivial query."""
        try:
            self.table("categories").select("id").limit(1).execute()
            return {
                'status': 'healthy',
                'url': self.config.url
            }
        except Exception as e:
            logger.error(f"Supabase health check failed: {e}")
            return {
                'status': 'unhealthy',
                'error': str(e),
                'url': self.config.url
            }
