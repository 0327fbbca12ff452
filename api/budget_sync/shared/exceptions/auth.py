"""
Excepciones relacionadas con autenticación contra la nube.
"""
from budget_sync.shared.exceptions.base import AppException


class AuthException(AppException):
    """Excepción base para errores de autenticación."""
    
    def __init__(self, message: str, error_code: str = "AUTH_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=401,
            error_code=error_code,
            details=details
        )


class NotAuthenticatedException(AuthException):
    """No hay identidad en la nube: el sync se niega a iniciar."""
    
    def __init__(self, message: str = "Usuario no autenticado"):
        super().__init__(
            message=message,
            error_code="NOT_AUTHENTICATED"
        )


class InvalidCredentialsException(AuthException):
    """Excepción para credenciales inválidas."""
    
    def __init__(self, reason: str = ""):
        super().__init__(
            message="Credenciales inválidas",
            error_code="INVALID_CREDENTIALS",
            details={"reason": reason} if reason else None
        )


class TokenExpiredException(AuthException):
    """El refresh token ya no es válido y hay que iniciar sesión de nuevo."""
    
    def __init__(self):
        super().__init__(
            message="La sesión ha expirado",
            error_code="TOKEN_EXPIRED"
        )
