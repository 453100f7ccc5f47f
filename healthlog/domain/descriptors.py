"""
记录类型描述符

血压、体重、体温三类记录结构相同，只有数值字段不同。
每种类型由一个 RecordDescriptor 描述（表模型、字段、URL 路径），
通用的校验、CRUD 和统计逻辑都按描述符驱动，不再按类型复制代码。
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from dateutil import parser as date_parser

from healthlog.domain.errors import ValidationError
from healthlog.infrastructure.database.models import (
    BloodPressureRecord,
    DocumentRecord,
    TemperatureRecord,
    WeightRecord,
)

logger = logging.getLogger(__name__)

FIELD_INT = "int"
FIELD_DECIMAL = "decimal"
FIELD_TEXT = "text"

# Integer 列（32 位有符号）的取值范围
INTEGER_MIN = -(2 ** 31)
INTEGER_MAX = 2 ** 31 - 1


@dataclass(frozen=True)
class FieldSpec:
    """
    字段定义

    Attributes:
        name: 字段名（与表列名、JSON 键一致）
        kind: 字段类型（int / decimal / text）
        required: 是否必填
        positive: 数值是否必须大于0
        scale: decimal 字段保留的小数位数
        precision: decimal 字段的总有效位数（与表列 Numeric(precision, scale) 一致）
        unit: 展示单位
    """
    name: str
    kind: str
    required: bool = True
    positive: bool = True
    scale: int = 0
    precision: int = 0
    unit: str = ""

    def within_column_range(self, number: Decimal) -> bool:
        """数值是否能存入对应的表列"""
        if self.kind == FIELD_INT:
            return INTEGER_MIN <= number <= INTEGER_MAX
        if self.precision:
            return abs(number) < Decimal(10) ** (self.precision - self.scale)
        return True


@dataclass(frozen=True)
class RecordDescriptor:
    """
    记录类型描述符

    Attributes:
        key: 类型键（bp / weight / temp / docs），也是导出与同步数据中的分组名
        path: URL 路径段
        label: 日志中使用的名称
        model: ORM 模型类
        fields: 除 entry_date、notes 之外的业务字段
        metric_fields: 参与统计的数值字段
    """
    key: str
    path: str
    label: str
    model: Type[Any]
    fields: Tuple[FieldSpec, ...]
    metric_fields: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def field_names(self) -> List[str]:
        return [spec.name for spec in self.fields]


BLOOD_PRESSURE = RecordDescriptor(
    key="bp",
    path="blood-pressure",
    label="血压",
    model=BloodPressureRecord,
    fields=(
        FieldSpec("systolic", FIELD_INT, unit="mmHg"),
        FieldSpec("diastolic", FIELD_INT, unit="mmHg"),
    ),
    metric_fields=("systolic", "diastolic"),
)

WEIGHT = RecordDescriptor(
    key="weight",
    path="weight",
    label="体重",
    model=WeightRecord,
    fields=(FieldSpec("weight", FIELD_DECIMAL, scale=2, precision=6, unit="kg"),),
    metric_fields=("weight",),
)

TEMPERATURE = RecordDescriptor(
    key="temp",
    path="temperature",
    label="体温",
    model=TemperatureRecord,
    fields=(FieldSpec("temperature", FIELD_DECIMAL, scale=1, precision=4, unit="°C"),),
    metric_fields=("temperature",),
)

DOCUMENT = RecordDescriptor(
    key="docs",
    path="documents",
    label="文档",
    model=DocumentRecord,
    fields=(FieldSpec("doc_type", FIELD_TEXT),),
)

# 数值记录类型（参与批量同步）
NUMERIC_DESCRIPTORS: Tuple[RecordDescriptor, ...] = (BLOOD_PRESSURE, WEIGHT, TEMPERATURE)

DESCRIPTORS_BY_KEY: Dict[str, RecordDescriptor] = {
    descriptor.key: descriptor
    for descriptor in NUMERIC_DESCRIPTORS + (DOCUMENT,)
}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_entry_date(value: Any) -> Optional[date]:
    """
    解析记录日期

    支持 date / datetime 对象，以及 YYYY-MM-DD、YYYY/MM/DD 等常见格式的字符串。

    Args:
        value: 原始值

    Returns:
        date 对象，无法解析时返回 None
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return date_parser.parse(value.strip()).date()
    except (ValueError, OverflowError) as e:
        logger.debug(f"日期解析失败: {value!r}, 错误: {e}")
        return None


def _parse_number(spec: FieldSpec, value: Any) -> Optional[Any]:
    if isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    if spec.positive and number <= 0:
        return None
    try:
        if spec.kind == FIELD_INT:
            if number != number.to_integral_value():
                return None
        else:
            number = number.quantize(Decimal(1).scaleb(-spec.scale), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # 位数超出 decimal 上下文精度
        return None
    if not spec.within_column_range(number):
        return None
    return int(number) if spec.kind == FIELD_INT else number


def clean_payload(descriptor: RecordDescriptor, payload: Mapping[str, Any]) -> Dict[str, Any]:
    """
    校验并规范化记录数据

    只做存在性与正负号检查：entry_date 和所有必填字段必须存在，
    数值字段必须可解析、大于0，且能存入对应的表列。notes 为空字符串时保存为 NULL。

    Args:
        descriptor: 记录类型描述符
        payload: 原始请求数据

    Returns:
        可直接写入数据库的字段字典

    Raises:
        ValidationError: 存在缺失或非法字段
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("Missing required fields", ["entry_date"] + descriptor.field_names)

    invalid: List[str] = []
    cleaned: Dict[str, Any] = {}

    entry_date = parse_entry_date(payload.get("entry_date"))
    if entry_date is None:
        invalid.append("entry_date")
    else:
        cleaned["entry_date"] = entry_date

    for spec in descriptor.fields:
        raw = payload.get(spec.name)
        if _is_blank(raw):
            if spec.required:
                invalid.append(spec.name)
            continue
        if spec.kind == FIELD_TEXT:
            cleaned[spec.name] = str(raw).strip()
            continue
        value = _parse_number(spec, raw)
        if value is None:
            invalid.append(spec.name)
        else:
            cleaned[spec.name] = value

    if invalid:
        raise ValidationError("Missing required fields", invalid)

    notes = payload.get("notes")
    cleaned["notes"] = None if _is_blank(notes) else str(notes)
    return cleaned
