"""
Gate de autenticación sobre Firebase Auth REST.

Endpoints usados:
- identitytoolkit: accounts:signInWithPassword / accounts:signUp
- securetoken: token (refresh_token -> id_token nuevo)
"""
from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import Any, Callable, Dict, List, Optional

import httpx
from loguru import logger

from budget_sync.domain.entities.identity import Identity
from budget_sync.domain.repositories.auth_gate import IAuthGate
from budget_sync.shared.exceptions.auth import (
    AuthException,
    InvalidCredentialsException,
    NotAuthenticatedException,
    TokenExpiredException,
)
from budget_sync.shared.utils.datetime_utils import DateTimeUtils

AuthListener = Callable[[Optional[Identity]], None]

# Margen antes de la expiración para renovar el id_token
REFRESH_MARGIN_SECONDS = 60


class FirebaseAuthGate(IAuthGate):
    """
    Mantiene la identidad actual en memoria y entrega un bearer token vigente.
    """

    def __init__(
        self,
        api_key: str,
        *,
        auth_base_url: str = "https://identitytoolkit.googleapis.com/v1",
        token_base_url: str = "https://securetoken.googleapis.com/v1",
        timeout_s: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._auth_base_url = auth_base_url.rstrip("/")
        self._token_base_url = token_base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._transport = transport
        self._identity: Optional[Identity] = None
        self._listeners: List[AuthListener] = []
        self._refresh_lock = asyncio.Lock()

    def current_identity(self) -> Optional[Identity]:
        return self._identity

    async def sign_in(self, email: str, password: str) -> Identity:
        """Inicia sesión con email y contraseña."""
        data = await self._post_identity("accounts:signInWithPassword", email, password)
        return self._set_identity(self._identity_from_sign_in(data))

    async def sign_up(self, email: str, password: str) -> Identity:
        """Crea la cuenta y deja la sesión iniciada."""
        data = await self._post_identity("accounts:signUp", email, password)
        return self._set_identity(self._identity_from_sign_in(data))

    def sign_out(self) -> None:
        if self._identity is None:
            return
        logger.info(f"Sesión cerrada para {self._identity.email or self._identity.uid}")
        self._set_identity(None)

    async def get_id_token(self) -> str:
        """
        Retorna el id_token vigente, renovándolo si expira en menos de
        REFRESH_MARGIN_SECONDS.

        Raises:
            NotAuthenticatedException: si no hay sesión
            TokenExpiredException: si el refresh token fue revocado
        """
        identity = self._identity
        if identity is None:
            raise NotAuthenticatedException()
        if not identity.expires_within(REFRESH_MARGIN_SECONDS):
            return identity.id_token

        async with self._refresh_lock:
            # Otro caller pudo renovar mientras esperábamos el lock
            identity = self._identity
            if identity is None:
                raise NotAuthenticatedException()
            if identity.expires_within(REFRESH_MARGIN_SECONDS):
                identity = await self._refresh(identity)
            return identity.id_token

    def on_auth_change(self, callback: AuthListener) -> Callable[[], None]:
        """Registra un listener de inicio/cierre de sesión. Retorna el cancelador."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def _refresh(self, identity: Identity) -> Identity:
        url = f"{self._token_base_url}/token"
        async with httpx.AsyncClient(timeout=self._timeout_s, transport=self._transport) as client:
            response = await client.post(
                url,
                params={"key": self._api_key},
                data={"grant_type": "refresh_token", "refresh_token": identity.refresh_token},
            )

        if response.status_code != 200:
            logger.warning(f"No se pudo renovar el token ({response.status_code}): {response.text}")
            self._set_identity(None)
            raise TokenExpiredException()

        data = response.json()
        refreshed = Identity(
            uid=data.get("user_id") or identity.uid,
            email=identity.email,
            id_token=data["id_token"],
            refresh_token=data.get("refresh_token") or identity.refresh_token,
            expires_at=self._expires_at(data.get("expires_in")),
        )
        # La identidad no cambia: no se notifica a los listeners
        self._identity = refreshed
        logger.debug(f"Token renovado para {refreshed.uid}")
        return refreshed

    async def _post_identity(self, endpoint: str, email: str, password: str) -> Dict[str, Any]:
        url = f"{self._auth_base_url}/{endpoint}"
        payload = {"email": email, "password": password, "returnSecureToken": True}
        async with httpx.AsyncClient(timeout=self._timeout_s, transport=self._transport) as client:
            response = await client.post(url, params={"key": self._api_key}, json=payload)

        if response.status_code == 200:
            return response.json()

        reason = self._error_reason(response)
        if response.status_code == 400:
            logger.warning(f"Autenticación rechazada para {email}: {reason}")
            raise InvalidCredentialsException(reason)
        raise AuthException(
            f"Firebase Auth respondió {response.status_code}",
            details={"reason": reason},
        )

    @staticmethod
    def _error_reason(response: httpx.Response) -> str:
        try:
            return response.json().get("error", {}).get("message", "") or response.text
        except ValueError:
            return response.text

    @staticmethod
    def _expires_at(expires_in: Any):
        try:
            seconds = int(expires_in)
        except (TypeError, ValueError):
            seconds = 3600
        return DateTimeUtils.now_utc() + timedelta(seconds=seconds)

    def _identity_from_sign_in(self, data: Dict[str, Any]) -> Identity:
        return Identity(
            uid=data["localId"],
            email=data.get("email"),
            id_token=data["idToken"],
            refresh_token=data.get("refreshToken", ""),
            expires_at=self._expires_at(data.get("expiresIn")),
        )

    def _set_identity(self, identity: Optional[Identity]) -> Optional[Identity]:
        self._identity = identity
        if identity is not None:
            logger.info(f"Sesión iniciada: {identity.email or identity.uid}")
        for listener in list(self._listeners):
            try:
                listener(identity)
            except Exception as e:
                logger.error(f"Error en listener de autenticación: {e}")
        return identity
