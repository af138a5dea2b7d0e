from __future__ import annotations
import threading
import polars as pl
from typing import Optional, Dict, Type, List, Any
from pathlib import Path
from logging import getLogger
from enum import Enum

logger = getLogger(__name__)

class DBType(Enum):
    CSV     = "csv"
    PARQUET = "parquet"

class BridgeDB:
    """A folder holding one file per table, in the format of the subclass"""
    _registry: Dict[DBType, Type["BridgeDB"]] = {}
    ext: str = ""

    def __init__(self, path: Optional[Path] = None):
        self.locn = Path(path if path else ".")
        if self.locn.exists() and not self.locn.is_dir():
            raise FileExistsError(f"Path '{self.locn}' exists and is not a directory")
        self.locn.mkdir(parents=True, exist_ok=True)

    @classmethod
    def register(cls, db_type: DBType):
        """Decorator for subclasses to register themselves."""
        def decorator(subclass: Type["BridgeDB"]):
            cls._registry[db_type] = subclass
            return subclass
        return decorator

    @classmethod
    def create(cls, db_type: DBType, path: Path) -> "BridgeDB":
        if db_type not in cls._registry:
            raise ValueError(f"Unsupported DB type: {db_type}")
        return cls._registry[db_type](path)

    def _path(self, table: str) -> Path:
        return self.locn / f"{table}{self.ext}"

    def load(self, table: str, schema: Dict[str, type]) -> pl.DataFrame:
        """Read a table, or an empty one if it has never been saved."""
        path = self._path(table)
        if not path.is_file():
            return pl.DataFrame(schema=schema)
        df = self._read(path, schema)
        if set(df.columns) != set(schema):
            raise ValueError(f"Invalid schema in {path}. Expected {list(schema)}")
        return df.select(list(schema))

    def save(self, table: str, df: pl.DataFrame) -> None:
        self._write(df, self._path(table))

    def _read(self, path: Path, schema: Dict[str, type]) -> pl.DataFrame:
        raise NotImplementedError

    def _write(self, df: pl.DataFrame, path: Path) -> None:
        raise NotImplementedError

@BridgeDB.register(DBType.CSV)
class CsvBridgeDB(BridgeDB):
    ext = ".csv"

    def _read(self, path: Path, schema: Dict[str, type]) -> pl.DataFrame:
        return pl.read_csv(path, schema_overrides=schema)

    def _write(self, df: pl.DataFrame, path: Path) -> None:
        df.write_csv(path)

@BridgeDB.register(DBType.PARQUET)
class ParquetBridgeDB(BridgeDB):
    ext = ".parquet"

    def _read(self, path: Path, schema: Dict[str, type]) -> pl.DataFrame:
        return pl.read_parquet(path)

    def _write(self, df: pl.DataFrame, path: Path) -> None:
        df.write_parquet(path)

class DBComp:
    """One table of the tournament database, held in memory until sync()"""
    def __init__(self, db: BridgeDB, table: str, pkey: str, schema: Dict[str, type]):
        self.db = db
        self.table = table
        self.SCHEMA = schema
        self.df: pl.DataFrame = db.load(table, schema)
        self.maxId: int = int(self.df[pkey].max() or 0)  # type: ignore
        self._id_lock = threading.Lock()

    def next_id(self) -> int:
        with self._id_lock:
            self.maxId += 1
            return self.maxId

    def append_rows(self, rows: List[Dict[str, Any]]) -> None:
        if rows:
            self.df = pl.concat([self.df, pl.DataFrame(rows, schema=self.SCHEMA)], how="vertical")

    def delete_where(self, predicate: pl.Expr) -> int:
        """Drop the matching rows and return how many there were."""
        before: int = self.df.height
        self.df = self.df.filter(~predicate)
        return before - self.df.height

    def sync(self) -> None:
        try:
            self.db.save(self.table, self.df)
        except Exception as e:
            logger.error(f"Error saving {self.table} to disk: {str(e)}")
            raise
