"""
Utilidades para manejo de fechas y horas.

Los timestamps de sync (updatedAt/deletedAt/createdAt) viajan como texto
ISO-8601. Se comparan siempre como datetime aware en UTC, nunca como string,
porque la nube puede devolver otra precision o sufijo ("Z" vs "+00:00").
"""
from datetime import datetime, timezone
from typing import Any, Optional


class DateTimeUtils:
    """Clase de utilidades para operaciones con fechas y horas."""

    @staticmethod
    def now_utc() -> datetime:
        """
        Obtiene la fecha y hora actual en UTC.

        Returns:
            datetime: Fecha y hora actual en UTC
        """
        return datetime.now(timezone.utc)

    @staticmethod
    def ensure_utc(dt: datetime) -> datetime:
        """Normaliza datetime a UTC (aware). Los naive se asumen UTC."""
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    @staticmethod
    def to_iso_string(dt: datetime, timespec: str = "milliseconds") -> str:
        """
        Convierte un datetime a string ISO 8601 en UTC con sufijo 'Z'.

        Args:
            dt: Objeto datetime
            timespec: Precision ("milliseconds" para timestamps locales,
                "microseconds" para la nube, que guarda microsegundos)

        Returns:
            str: Fecha en formato ISO 8601
        """
        dt_utc = DateTimeUtils.ensure_utc(dt)
        return dt_utc.isoformat(timespec=timespec).replace("+00:00", "Z")

    @staticmethod
    def now_iso() -> str:
        """Timestamp actual listo para updated_at/deleted_at."""
        return DateTimeUtils.to_iso_string(DateTimeUtils.now_utc())

    @staticmethod
    def from_iso_string(iso_string: Any) -> Optional[datetime]:
        """
        Convierte un string ISO 8601 a datetime aware en UTC.

        Acepta sufijo 'Z' y fracciones de segundo de cualquier longitud
        (Firestore devuelve nanosegundos).

        Args:
            iso_string: String en formato ISO 8601

        Returns:
            Optional[datetime]: Objeto datetime o None si hay error
        """
        if isinstance(iso_string, datetime):
            return DateTimeUtils.ensure_utc(iso_string)
        if not iso_string or not isinstance(iso_string, str):
            return None
        raw = iso_string.strip().replace("Z", "+00:00")
        # fromisoformat (<3.11) no acepta mas de 6 decimales
        if "." in raw:
            head, _, tail = raw.partition(".")
            digits = ""
            rest = ""
            for i, ch in enumerate(tail):
                if not ch.isdigit():
                    rest = tail[i:]
                    break
                digits += ch
            raw = f"{head}.{digits[:6].ljust(6, '0')}{rest}"
        try:
            return DateTimeUtils.ensure_utc(datetime.fromisoformat(raw))
        except (ValueError, TypeError):
            return None
