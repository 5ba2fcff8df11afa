from __future__ import annotations

from dataclasses import dataclass

import mysql.connector


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "attendance_bot")),
        )


class DatabaseConnection:
    """DB connection factory.

    Note: We create short-lived connections per operation, so one bulk call
    maps onto exactly one connection and one transaction.
    """

    def __init__(self, config: DBConfig, *, connect_timeout: int = 5):
        self._config = config
        self._connect_timeout = int(connect_timeout)

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            connection_timeout=self._connect_timeout,
            time_zone="+00:00",
        )
