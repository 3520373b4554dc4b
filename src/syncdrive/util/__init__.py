from .ids import new_task_id, new_uuid
from .time import dt_to_str, normalize_dt, now_utc, parse_rfc3339, str_to_dt, to_rfc3339

__all__ = [
    "new_uuid",
    "new_task_id",
    "now_utc",
    "parse_rfc3339",
    "to_rfc3339",
    "normalize_dt",
    "dt_to_str",
    "str_to_dt",
]
