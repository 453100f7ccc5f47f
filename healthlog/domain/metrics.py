"""
统计与分级辅助函数

纯函数，输入为已经查询出来、按时间倒序（最新在前）排列的记录序列。
记录可以是 ORM 对象、Pydantic 模型或字典。
所有计算使用 Decimal，按四舍五入保留1位小数，结果以字符串返回。
"""
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Sequence, TypeVar

from healthlog.domain.descriptors import (
    BLOOD_PRESSURE,
    DESCRIPTORS_BY_KEY,
    RecordDescriptor,
    parse_entry_date,
)

T = TypeVar("T")

ZERO = "0.0"
NO_DATA = "no data"
NO_DATA_LABEL = "No data"

# 分级标签对应的提示等级
STATUS_LEVELS: Dict[str, str] = {
    NO_DATA_LABEL: "neutral",
    "Normal": "ok",
    "Elevated": "warn",
    "High": "warn",
    "Very high": "alert",
    "Low": "warn",
    "Fever": "alert",
}

_ONE_PLACE = Decimal("0.1")


def _get(entry: Any, name: str, default: Any = None) -> Any:
    if isinstance(entry, dict):
        return entry.get(name, default)
    return getattr(entry, name, default)


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _format(value: Decimal) -> str:
    return str(value.quantize(_ONE_PLACE, rounding=ROUND_HALF_UP))


def _descriptor(kind: Any) -> RecordDescriptor:
    if isinstance(kind, RecordDescriptor):
        return kind
    return DESCRIPTORS_BY_KEY[kind]


def average(values: Iterable[Any]) -> str:
    """
    算术平均值（保留1位小数）

    Args:
        values: 数值序列

    Returns:
        平均值字符串；空序列返回 "0.0"
    """
    numbers = [_to_decimal(value) for value in values]
    if not numbers:
        return ZERO
    return _format(sum(numbers) / len(numbers))


def delta(values: Sequence[Any]) -> str:
    """
    首尾差值：第一个元素减最后一个元素（即最新值减最早值）

    Args:
        values: 按时间倒序排列的数值序列

    Returns:
        带符号的差值字符串，非负数带 "+" 前缀；少于2个元素返回 "0.0"
    """
    if len(values) < 2:
        return ZERO
    diff = _to_decimal(values[0]) - _to_decimal(values[-1])
    text = _format(diff)
    return f"+{text}" if diff >= 0 else text


def latest_of(entries: Sequence[T]) -> Optional[T]:
    """返回最新一条记录（序列第一个元素），空序列返回 None"""
    return entries[0] if entries else None


def range_average(
    entries: Iterable[Any],
    window_days: int,
    kind: Any,
    today: Optional[date] = None,
) -> Optional[Dict[str, str]]:
    """
    最近 N 天平均值

    筛选 entry_date 落在 [today - window_days, today] 内的记录，
    对该类型的每个统计字段分别求平均（血压会得到收缩压、舒张压两个平均值）。

    Args:
        entries: 记录序列
        window_days: 窗口天数
        kind: 记录类型键（bp / weight / temp）或描述符
        today: 基准日期（默认当天）

    Returns:
        {字段名: 平均值} 字典；窗口内无数据时返回 None
    """
    descriptor = _descriptor(kind)
    today = today or date.today()
    cutoff = today - timedelta(days=window_days)

    relevant = []
    for entry in entries:
        entry_date = parse_entry_date(_get(entry, "entry_date"))
        if entry_date is not None and cutoff <= entry_date <= today:
            relevant.append(entry)

    if not relevant:
        return None
    return {
        name: average(_get(entry, name) for entry in relevant)
        for name in descriptor.metric_fields
    }


def classify_blood_pressure(entry: Any) -> str:
    """
    血压分级

    按固定优先级判断：
    - Normal：收缩压 < 120 且 舒张压 < 80
    - Elevated：收缩压 < 130 且 舒张压 < 80
    - High：收缩压 < 140 或 舒张压 < 90
    - Very high：其他情况

    Args:
        entry: 血压记录（含 systolic / diastolic），可为 None

    Returns:
        分级标签；无记录时返回 "No data"
    """
    if entry is None:
        return NO_DATA_LABEL
    systolic = _to_decimal(_get(entry, "systolic"))
    diastolic = _to_decimal(_get(entry, "diastolic"))
    if systolic < 120 and diastolic < 80:
        return "Normal"
    if systolic < 130 and diastolic < 80:
        return "Elevated"
    if systolic < 140 or diastolic < 90:
        return "High"
    return "Very high"


def classify_temperature(entry: Any) -> str:
    """
    体温分级

    - Low：< 36.1
    - Normal：36.1 ~ 37.2（含 37.2）
    - Elevated：37.2 ~ 38.0（不含 37.2，含 38.0）
    - Fever：> 38.0

    37.2 同时落在 Normal 上界和 Elevated 下界，按顺序判断时归为 Normal。

    Args:
        entry: 体温记录、字典或直接的数值，可为 None

    Returns:
        分级标签；无记录时返回 "No data"
    """
    if entry is None:
        return NO_DATA_LABEL
    if isinstance(entry, (int, float, Decimal, str)):
        temperature = _to_decimal(entry)
    else:
        temperature = _to_decimal(_get(entry, "temperature"))
    if temperature < Decimal("36.1"):
        return "Low"
    if temperature <= Decimal("37.2"):
        return "Normal"
    if temperature <= Decimal("38.0"):
        return "Elevated"
    return "Fever"


def classify(kind: Any, entry: Any) -> Optional[str]:
    """按记录类型分级，没有分级规则的类型（体重）返回 None"""
    key = _descriptor(kind).key
    if key == "bp":
        return classify_blood_pressure(entry)
    if key == "temp":
        return classify_temperature(entry)
    return None


def _searchable_text(entry: Any, descriptor: RecordDescriptor) -> str:
    parts = [str(_get(entry, name, "")) for name in descriptor.metric_fields]
    parts.append(_get(entry, "notes") or "")
    return " ".join(parts).lower()


def apply_entry_filters(
    entries: Iterable[T],
    kind: Any,
    search: str = "",
    date_from: Optional[Any] = None,
    date_to: Optional[Any] = None,
) -> List[T]:
    """
    按日期区间与关键字筛选记录

    Args:
        entries: 记录序列
        kind: 记录类型键或描述符
        search: 关键字（匹配数值字段和备注，不区分大小写）
        date_from: 起始日期（含）
        date_to: 截止日期（含）

    Returns:
        筛选后的记录列表（保持原顺序）
    """
    descriptor = _descriptor(kind)
    needle = (search or "").strip().lower()
    start = parse_entry_date(date_from) if date_from else None
    end = parse_entry_date(date_to) if date_to else None

    result = []
    for entry in entries:
        entry_date = parse_entry_date(_get(entry, "entry_date"))
        if start and (entry_date is None or entry_date < start):
            continue
        if end and (entry_date is None or entry_date > end):
            continue
        if needle and needle not in _searchable_text(entry, descriptor):
            continue
        result.append(entry)
    return result


def format_trend_value(kind: Any, entry: Any) -> str:
    """
    格式化展示值

    血压显示为 "118/76 mmHg"，体重 "72.5 kg"，体温 "36.6°C"。

    Args:
        kind: 记录类型键或描述符
        entry: 记录或 range_average 的结果，可为 None

    Returns:
        展示字符串；无数据时返回 "no data"
    """
    if entry is None:
        return NO_DATA
    descriptor = _descriptor(kind)
    if descriptor is BLOOD_PRESSURE:
        systolic = _to_decimal(_get(entry, "systolic")).quantize(Decimal(1), rounding=ROUND_HALF_UP)
        diastolic = _to_decimal(_get(entry, "diastolic")).quantize(Decimal(1), rounding=ROUND_HALF_UP)
        return f"{systolic}/{diastolic} mmHg"
    spec = descriptor.fields[0]
    value = _format(_to_decimal(_get(entry, spec.name)))
    separator = " " if spec.unit == "kg" else ""
    return f"{value}{separator}{spec.unit}"
