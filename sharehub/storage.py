import logging
import os
import shutil
import time
from typing import Iterable

from fastapi import Request, UploadFile

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads"


class FileStore:
    """Arquivos enviados, gravados em disco e servidos em /uploads."""

    def __init__(self, directory: str):
        self.directory = directory
        os.makedirs(self.directory, exist_ok=True)

    def _unique_name(self, filename: str) -> str:
        base = os.path.basename(filename or "") or "file"
        name = f"{int(time.time() * 1000)}_{base}"
        stem, ext = os.path.splitext(name)
        n = 1
        while os.path.exists(os.path.join(self.directory, name)):
            name = f"{stem}_{n}{ext}"
            n += 1
        return name

    def save(self, upload: UploadFile) -> str:
        """Grava o arquivo em disco e devolve o caminho público."""
        name = self._unique_name(upload.filename)
        # "xb": nunca sobrescreve um arquivo existente
        with open(os.path.join(self.directory, name), "xb") as out:
            shutil.copyfileobj(upload.file, out)
        return f"{PUBLIC_PREFIX}/{name}"

    def local_path(self, public_path: str) -> str:
        return os.path.join(self.directory, os.path.basename(public_path))

    def remove(self, public_paths: Iterable[str]) -> None:
        for public_path in public_paths:
            try:
                os.remove(self.local_path(public_path))
            except FileNotFoundError:
                pass
            except OSError:
                logger.warning("Não foi possível remover %s", public_path, exc_info=True)


def get_file_store(request: Request) -> FileStore:
    return request.app.state.file_store
