from __future__ import annotations

import keyring
from keyring.errors import KeyringError, PasswordDeleteError


class VaultError(RuntimeError):
    pass


def store_api_key(service: str, provider_id: str, value: str) -> None:
    if not value.strip():
        raise VaultError("API key cannot be empty")
    try:
        keyring.set_password(service, provider_id, value)
    except KeyringError as exc:
        raise VaultError(str(exc)) from exc


def lookup_api_key(service: str, provider_id: str) -> str | None:
    try:
        secret = keyring.get_password(service, provider_id)
    except KeyringError as exc:
        raise VaultError(str(exc)) from exc
    return secret or None


def delete_api_key(service: str, provider_id: str) -> bool:
    try:
        keyring.delete_password(service, provider_id)
    except PasswordDeleteError:
        return False
    except KeyringError as exc:
        raise VaultError(str(exc)) from exc
    return True
