"""
记录描述符与字段校验测试

Pytest 命令示例：
================

pytest cursor_test/domain/test_descriptors.py -v
"""
from datetime import date, datetime
from decimal import Decimal

import pytest

from healthlog.domain.descriptors import (
    BLOOD_PRESSURE,
    DESCRIPTORS_BY_KEY,
    DOCUMENT,
    TEMPERATURE,
    WEIGHT,
    clean_payload,
    parse_entry_date,
)
from healthlog.domain.errors import Err, Ok, StorageError, ValidationError


class TestParseEntryDate:
    """日期解析测试类"""

    def test_parse_supported_values(self):
        """
        测试用例：parse_entry_date（可解析的值）

        验证：
        - 支持 date、datetime、ISO 字符串和斜杠格式
        """
        assert parse_entry_date(date(2024, 1, 1)) == date(2024, 1, 1)
        assert parse_entry_date(datetime(2024, 1, 1, 8, 30)) == date(2024, 1, 1)
        assert parse_entry_date("2024-01-01") == date(2024, 1, 1)
        assert parse_entry_date("2024/01/02") == date(2024, 1, 2)

    @pytest.mark.parametrize("value", [None, "", "not a date", 20240101])
    def test_parse_invalid_values(self, value):
        """
        测试用例：parse_entry_date（无法解析的值）

        验证：
        - 返回 None 而不是抛出异常
        """
        assert parse_entry_date(value) is None


class TestCleanPayload:
    """clean_payload 测试类"""

    def test_blood_pressure_valid(self):
        """
        测试用例：血压数据校验通过

        验证：
        - 字符串数值转换为整数
        - 空白备注保存为 None
        """
        # Act（执行）
        cleaned = clean_payload(
            BLOOD_PRESSURE,
            {"entry_date": "2024-01-01", "systolic": "118", "diastolic": 76, "notes": "  "},
        )

        # Assert（断言）
        assert cleaned == {
            "entry_date": date(2024, 1, 1),
            "systolic": 118,
            "diastolic": 76,
            "notes": None,
        }

    def test_missing_fields_reported(self):
        """
        测试用例：缺少必填字段

        验证：
        - 抛出 ValidationError
        - fields 列出全部缺失字段
        """
        with pytest.raises(ValidationError) as exc_info:
            clean_payload(BLOOD_PRESSURE, {"systolic": 120})

        assert exc_info.value.fields == ["entry_date", "diastolic"]
        assert exc_info.value.to_dict()["error"] == "validation_error"

    @pytest.mark.parametrize("value", [0, -5, "abc", True, "NaN", 120.5])
    def test_invalid_blood_pressure_values(self, value):
        """
        测试用例：非法血压数值

        验证：
        - 0、负数、非数字、布尔值、NaN、非整数都被拒绝
        """
        with pytest.raises(ValidationError) as exc_info:
            clean_payload(BLOOD_PRESSURE, {"entry_date": "2024-01-01", "systolic": value, "diastolic": 80})

        assert exc_info.value.fields == ["systolic"]

    def test_decimal_fields_quantized(self):
        """
        测试用例：小数字段按存储精度四舍五入

        验证：
        - 体重保留2位小数，体温保留1位小数
        """
        weight = clean_payload(WEIGHT, {"entry_date": "2024-01-01", "weight": 72.456})
        temperature = clean_payload(TEMPERATURE, {"entry_date": "2024-01-01", "temperature": "36.65"})

        assert weight["weight"] == Decimal("72.46")
        assert temperature["temperature"] == Decimal("36.7")

    @pytest.mark.parametrize(
        "descriptor,field_name,value",
        [
            (WEIGHT, "weight", 1e40),
            (WEIGHT, "weight", "1e40"),
            (WEIGHT, "weight", "9999.995"),
            (TEMPERATURE, "temperature", 1000),
            (BLOOD_PRESSURE, "systolic", 10 ** 20),
            (BLOOD_PRESSURE, "systolic", 2 ** 31),
        ],
    )
    def test_values_beyond_column_range_rejected(self, descriptor, field_name, value):
        """
        测试用例：超出表列范围的数值

        验证：
        - 抛出 ValidationError 而不是 decimal 异常
        - 四舍五入后超出 Numeric 精度的值同样被拒绝
        - 超出 32 位整数范围的血压值被拒绝
        """
        payload = {"entry_date": "2024-01-01", "systolic": 120, "diastolic": 80, field_name: value}

        with pytest.raises(ValidationError) as exc_info:
            clean_payload(descriptor, payload)

        assert exc_info.value.fields == [field_name]

    def test_values_at_column_limit_accepted(self):
        """
        测试用例：表列能容纳的最大值

        验证：
        - 体重 9999.99、体温 999.9、血压 2**31-1 均可通过
        """
        weight = clean_payload(WEIGHT, {"entry_date": "2024-01-01", "weight": "9999.99"})
        temperature = clean_payload(TEMPERATURE, {"entry_date": "2024-01-01", "temperature": "999.9"})
        bp = clean_payload(BLOOD_PRESSURE, {"entry_date": "2024-01-01", "systolic": 2 ** 31 - 1, "diastolic": 80})

        assert weight["weight"] == Decimal("9999.99")
        assert temperature["temperature"] == Decimal("999.9")
        assert bp["systolic"] == 2 ** 31 - 1

    def test_document_fields(self):
        """
        测试用例：文档字段校验

        验证：
        - doc_type 为必填文本，去除首尾空白
        """
        cleaned = clean_payload(DOCUMENT, {"entry_date": "2024-02-01", "doc_type": " Lab report ", "notes": "fasting"})
        assert cleaned["doc_type"] == "Lab report"
        assert cleaned["notes"] == "fasting"

        with pytest.raises(ValidationError) as exc_info:
            clean_payload(DOCUMENT, {"entry_date": "2024-02-01"})
        assert exc_info.value.fields == ["doc_type"]

    def test_descriptor_registry(self):
        """
        测试用例：描述符注册表

        验证：
        - 同步与导出使用的分组键
        """
        assert set(DESCRIPTORS_BY_KEY) == {"bp", "weight", "temp", "docs"}
        assert BLOOD_PRESSURE.field_names == ["systolic", "diastolic"]


class TestResult:
    """Ok / Err 结果类型测试类"""

    def test_ok_unwrap(self):
        """
        测试用例：Ok

        验证：
        - unwrap 返回携带的值
        """
        result = Ok([1, 2])
        assert result.ok is True
        assert result.unwrap() == [1, 2]

    def test_err_unwrap_raises(self):
        """
        测试用例：Err

        验证：
        - unwrap 抛出携带的领域错误
        """
        result = Err(StorageError("down"))
        assert result.ok is False
        with pytest.raises(StorageError):
            result.unwrap()
