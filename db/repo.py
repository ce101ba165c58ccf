import sqlite3
from typing import Iterable, Optional

from core.time import now_iso
from .db import new_id

# Cột lưu 0/1 trong SQLite nhưng trả về client dạng bool
BOOL_COLUMNS = ("is_active", "is_visible")


def as_dict(row) -> Optional[dict]:
    if row is None:
        return None
    d = dict(row)
    for col in BOOL_COLUMNS:
        if col in d and d[col] is not None:
            d[col] = bool(d[col])
    return d


def fetch_one(con: sqlite3.Connection, table: str, row_id: str, key: str = "id"):
    row = con.execute(f"SELECT * FROM {table} WHERE {key} = ?", (row_id,)).fetchone()
    return as_dict(row)


def fetch_all(
        con: sqlite3.Connection,
        table: str,
        order_by: str,
        where: Optional[dict] = None,
        columns: str = "*",
):
    """
    SELECT theo thứ tự khai báo; rowid làm khóa phụ để thứ tự luôn xác định.
    `where` là các điều kiện bằng nhau nối bằng AND.
    """
    sql = f"SELECT {columns} FROM {table}"
    params: list = []
    if where:
        sql += " WHERE " + " AND ".join(f"{k} = ?" for k in where)
        params.extend(where.values())
    sql += f" ORDER BY {order_by}, rowid DESC"
    return [as_dict(r) for r in con.execute(sql, params).fetchall()]


def insert_row(con: sqlite3.Connection, table: str, values: dict) -> dict:
    data = {"id": new_id(), **values}
    cols = ", ".join(data)
    marks = ", ".join("?" for _ in data)
    con.execute(f"INSERT INTO {table}({cols}) VALUES({marks})", tuple(data.values()))
    return fetch_one(con, table, data["id"])


def update_row(con: sqlite3.Connection, table: str, row_id: str, values: dict, key: str = "id"):
    """UPDATE theo khóa; không có dòng nào khớp -> None."""
    data = {**values, "updated_at": now_iso()}
    assigns = ", ".join(f"{k} = ?" for k in data)
    cur = con.execute(
        f"UPDATE {table} SET {assigns} WHERE {key} = ?",
        (*data.values(), row_id),
    )
    if cur.rowcount == 0:
        return None
    return fetch_one(con, table, row_id, key=key)


def delete_row(con: sqlite3.Connection, table: str, row_id: str) -> int:
    cur = con.execute(f"DELETE FROM {table} WHERE id = ?", (row_id,))
    return cur.rowcount


def upsert_row(con: sqlite3.Connection, table: str, values: dict, conflict: Iterable[str]) -> dict:
    """
    INSERT ... ON CONFLICT(<conflict>) DO UPDATE: trùng khóa thì ghi đè các cột còn lại,
    giữ nguyên id cũ. Trả về dòng sau khi ghi.
    """
    conflict = tuple(conflict)
    data = {"id": new_id(), **values}
    cols = ", ".join(data)
    marks = ", ".join("?" for _ in data)
    updates = ", ".join(f"{k} = excluded.{k}" for k in values if k not in conflict)
    target = ", ".join(conflict)
    con.execute(
        f"""
        INSERT INTO {table}({cols}) VALUES({marks})
        ON CONFLICT({target})
        DO UPDATE SET {updates}, updated_at = ?
        """,
        (*data.values(), now_iso()),
    )
    where = " AND ".join(f"{k} = ?" for k in conflict)
    row = con.execute(
        f"SELECT * FROM {table} WHERE {where}",
        tuple(values[k] for k in conflict),
    ).fetchone()
    return as_dict(row)
