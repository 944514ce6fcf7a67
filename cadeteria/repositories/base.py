# ==============================================================================
# REPOSITORIO BASE - Funcionalidad común para acceso a archivos JSON
# ==============================================================================

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List

from cadeteria.errors import PersistenceError

logger = logging.getLogger(__name__)


class BaseRepository(ABC):
    """
    Clase base abstracta para todos los repositorios.
    Proporciona lectura/escritura de archivos JSON completos
    y un lock por archivo para el ciclo leer-modificar-guardar.

    No hay actualizaciones parciales: cada cambio reescribe
    la colección entera.
    """

    # Un lock por ruta de archivo, compartido entre instancias. Las entradas
    # no se borran: hay cuatro archivos por carpeta de datos y una app usa
    # una sola carpeta, así que el diccionario solo crece con carpetas nuevas
    # (ej: un tmp_path por test).
    _locks: Dict[str, threading.RLock] = {}
    _locks_guard = threading.Lock()

    def __init__(self, file_path: str):
        """
        Inicializa el repositorio con la ruta al archivo JSON.

        Args:
            file_path: Ruta al archivo JSON de datos
        """
        self.file_path = os.path.abspath(file_path)
        self._lock = self._lock_for(self.file_path)

    @classmethod
    def _lock_for(cls, file_path: str) -> threading.RLock:
        """Obtiene o crea el lock de un archivo específico."""
        with cls._locks_guard:
            if file_path not in cls._locks:
                cls._locks[file_path] = threading.RLock()
            return cls._locks[file_path]

    @contextmanager
    def locked(self) -> Iterator['BaseRepository']:
        """
        Mantiene el lock de la colección durante un ciclo completo
        de lectura, modificación y escritura.

        Uso:
            with repo.locked():
                data = repo.load()
                ...
                repo.save(data)
        """
        with self._lock:
            yield self

    @abstractmethod
    def _empty_data(self) -> Any:
        """
        Retorna la estructura de datos vacía para este repositorio.

        Returns:
            Estructura vacía (dict, list, etc.) según el repositorio
        """

    def exists(self) -> bool:
        """True si el archivo existe y tiene contenido."""
        return os.path.exists(self.file_path) and os.path.getsize(self.file_path) > 0

    def _read_raw(self) -> Any:
        """
        Lee los datos crudos del archivo JSON.
        Archivo inexistente, vacío o corrupto equivale a datos vacíos.

        Returns:
            Datos parseados del JSON
        """
        with self._lock:
            try:
                with open(self.file_path, 'r', encoding='utf-8') as f:
                    content = f.read()
            except FileNotFoundError:
                return self._empty_data()
            except OSError as e:
                logger.warning("No se pudo leer %s: %s", self.file_path, e)
                return self._empty_data()

            if not content.strip():
                return self._empty_data()
            try:
                return json.loads(content)
            except json.JSONDecodeError as e:
                logger.warning("Archivo JSON ilegible %s: %s", self.file_path, e)
                return self._empty_data()

    def _write_raw(self, data: Any) -> None:
        """
        Escribe datos al archivo JSON.

        Args:
            data: Datos a serializar y escribir

        Raises:
            PersistenceError: Si hay error de escritura
        """
        with self._lock:
            temp_path = self.file_path + '.tmp'
            try:
                os.makedirs(os.path.dirname(self.file_path), exist_ok=True)
                # Escribir a archivo temporal primero para atomicidad
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(temp_path, self.file_path)
            except (OSError, TypeError, ValueError) as e:
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise PersistenceError(
                    f"No se pudo guardar {os.path.basename(self.file_path)}: {e}"
                ) from e


class ListRepository(BaseRepository):
    """
    Repositorio base para datos almacenados como lista.

    Ejemplo: pedidos.json -> [{...}, {...}]
    """

    def _empty_data(self) -> List:
        """Retorna lista vacía."""
        return []

    def get_all(self) -> List[Dict[str, Any]]:
        """
        Obtiene todos los registros.
        Los elementos que no son objetos se descartan.

        Returns:
            Lista con todos los datos
        """
        data = self._read_raw()
        if not isinstance(data, list):
            return []
        return [r for r in data if isinstance(r, dict)]

    def save_all(self, data: List[Dict[str, Any]]) -> None:
        """
        Guarda todos los registros (reemplazo completo).

        Args:
            data: Lista completa de datos
        """
        self._write_raw(data)


class ObjectRepository(BaseRepository):
    """
    Repositorio base para un único objeto JSON.

    Ejemplo: cadeteria.json -> {...}
    """

    def _empty_data(self) -> Dict:
        """Retorna diccionario vacío."""
        return {}

    def get(self) -> Dict[str, Any]:
        data = self._read_raw()
        return data if isinstance(data, dict) else {}

    def put(self, data: Dict[str, Any]) -> None:
        self._write_raw(data)
