from campusqa.repositories.base.base_repository import BaseRepository

__all__ = ["BaseRepository"]
