from typing import Optional
from jose import jwt, JWTError
import logging

from app.config.settings import settings

logger = logging.getLogger(__name__)


class AuthService:
    """Verificación de tokens emitidos por el servicio de identidad"""

    @staticmethod
    def verify_token(token: str) -> Optional[dict]:
        """Verificar y decodificar token"""
        try:
            payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
            return payload
        except JWTError as e:
            logger.warning(f"Token rechazado: {e}")
            return None
