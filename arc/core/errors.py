"""
Errores de arc.

El core solo define excepciones; los routers las traducen a Response y la CLI
se encarga del formato de salida.
"""


class ArcError(Exception):
    """Error base de arc."""
    pass


class ConfigError(ArcError):
    """Error de configuración (elemento faltante, nombre duplicado, vendor desconocido)."""
    pass


class ValidationError(ArcError):
    """El documento de configuración no pasa la validación de los modelos."""
    pass


class ProviderError(ArcError):
    """Error delegado desde un provider (mock, nube pública, etc.)."""
    pass


class ResolutionError(ArcError):
    """El recurso direccionado no existe."""
    pass


class AuthorizationError(ArcError):
    """aaa deniega la petición para el ámbito solicitado."""
    pass


class RemoteExecError(ArcError):
    """Fallo de conexión SSH o script remoto con salida distinta de cero."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output


class InternalError(ArcError):
    """Ruta o comando desconocido alcanzado en un router terminal."""
    pass
