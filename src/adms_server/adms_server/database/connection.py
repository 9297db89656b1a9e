from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "adms_db"
    connect_timeout: int = 10

    @classmethod
    def from_dict(cls, values: dict) -> "DBConfig":
        defaults = cls()
        return cls(
            host=str(values.get("host") or defaults.host),
            port=int(values.get("port") or defaults.port),
            user=str(values.get("user") or defaults.user),
            password=str(values.get("password") or ""),
            database=str(values.get("database") or defaults.database),
            connect_timeout=int(values.get("connect_timeout") or defaults.connect_timeout),
        )


class DatabaseConnection:
    """Process-wide connection factory.

    Each unit of work opens its own short-lived connection; request threads,
    the device sweep and the background writer never share one.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self, *, with_database: bool = True):
        params = {
            "host": self._config.host,
            "port": self._config.port,
            "user": self._config.user,
            "password": self._config.password,
            "connection_timeout": self._config.connect_timeout,
            "charset": "utf8mb4",
            "use_pure": True,
        }
        if with_database:
            params["database"] = self._config.database
        return mysql.connector.connect(**params)
