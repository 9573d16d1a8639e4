"""Pydantic configuration models with code-baked defaults.

Defaults live here; vetclinic.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel


class ClinicConfig(BaseModel):
    """[clinic] section."""

    model_config = {"frozen": True}

    name: str = "Veterinary Clinic System"


class StorageConfig(BaseModel):
    """[storage] section.

    File names are resolved against the data directory.
    """

    model_config = {"frozen": True}

    animals_file: str = "animals.txt"
    owners_file: str = "owners.txt"
    relations_file: str = "relations.txt"
    encoding: str = "utf-8"


class AuthConfig(BaseModel):
    """[auth] section.

    Fixed-credential gate. Not a security boundary.
    """

    model_config = {"frozen": True}

    username: str = "admin"
    password: str = "1234"
    required: bool = False
