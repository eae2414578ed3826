# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Base models for wire rows and domain records.
"""

from pydantic import BaseModel, ConfigDict


class BaseDto(BaseModel):
    """Wire-shaped row decoded from a table query response."""

    model_config = ConfigDict(
        # Columns the client does not map are ignored
        extra="ignore",
        populate_by_name=True,
    )


class BaseRecord(BaseModel):
    """Immutable domain record held transiently by the client."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
    )
