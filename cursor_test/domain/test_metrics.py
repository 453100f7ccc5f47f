"""
统计与分级辅助函数测试

Pytest 命令示例：
================

# 运行整个测试文件
pytest cursor_test/domain/test_metrics.py -v

# 运行特定的测试类
pytest cursor_test/domain/test_metrics.py::TestClassifyBloodPressure
"""
from datetime import date
from decimal import Decimal

import pytest

from healthlog.domain import metrics
from healthlog.domain.descriptors import TEMPERATURE, WEIGHT


class TestAverage:
    """average 测试类"""

    def test_average_rounds_to_one_place(self):
        """
        测试用例：average（正常情况）

        验证：
        - 结果为算术平均值
        - 四舍五入保留1位小数
        """
        assert metrics.average([118, 121, 125]) == "121.3"
        assert metrics.average([Decimal("72.45"), Decimal("72.50")]) == "72.5"
        assert metrics.average(["36.5", "36.6"]) == "36.6"

    def test_average_half_up(self):
        """
        测试用例：average（.x5 边界）

        验证：
        - 使用四舍五入而不是银行家舍入
        """
        assert metrics.average([Decimal("0.25")]) == "0.3"
        assert metrics.average([Decimal("0.35")]) == "0.4"

    def test_average_empty(self):
        """
        测试用例：average（空序列）

        验证：
        - 返回零值 "0.0"
        """
        assert metrics.average([]) == metrics.ZERO == "0.0"


class TestDelta:
    """delta 测试类"""

    def test_delta_positive_has_plus_sign(self):
        """
        测试用例：delta（最新值大于最早值）

        验证：
        - 结果为第一个减最后一个
        - 带 "+" 前缀
        """
        assert metrics.delta([74.0, 73.2, 72.5]) == "+1.5"

    def test_delta_negative(self):
        """
        测试用例：delta（最新值小于最早值）

        验证：
        - 负数保留 "-" 号，不带 "+"
        """
        assert metrics.delta([Decimal("71.0"), Decimal("72.5")]) == "-1.5"

    def test_delta_zero_has_plus_sign(self):
        """
        测试用例：delta（首尾相等）

        验证：
        - 差值为0时同样带 "+" 前缀
        """
        assert metrics.delta([120, 130, 120]) == "+0.0"

    @pytest.mark.parametrize("values", [[], [72.5]])
    def test_delta_short_sequence(self, values):
        """
        测试用例：delta（少于2个元素）

        验证：
        - 返回零值 "0.0"
        """
        assert metrics.delta(values) == "0.0"


class TestClassifyBloodPressure:
    """血压分级测试类"""

    @pytest.mark.parametrize(
        "systolic,diastolic,expected",
        [
            (119, 79, "Normal"),
            (120, 79, "Elevated"),
            (129, 79, "Elevated"),
            (125, 80, "High"),
            (135, 85, "High"),
            (145, 89, "High"),
            (145, 95, "Very high"),
        ],
    )
    def test_classify_thresholds(self, systolic, diastolic, expected):
        """
        测试用例：血压分级阈值

        验证：
        - 按 Normal -> Elevated -> High -> Very high 顺序判断
        - 收缩压或舒张压任一低于 High 阈值即为 High
        """
        entry = {"systolic": systolic, "diastolic": diastolic}
        assert metrics.classify_blood_pressure(entry) == expected

    def test_classify_missing_entry(self):
        """
        测试用例：血压分级（无记录）

        验证：
        - 返回 "No data"
        """
        assert metrics.classify_blood_pressure(None) == "No data"


class TestClassifyTemperature:
    """体温分级测试类"""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (36.0, "Low"),
            (36.1, "Normal"),
            (37.2, "Normal"),
            (37.3, "Elevated"),
            (38.0, "Elevated"),
            (38.1, "Fever"),
        ],
    )
    def test_classify_thresholds(self, value, expected):
        """
        测试用例：体温分级阈值

        验证：
        - 37.2 同时满足 Normal 上界和 Elevated 下界时归为 Normal
        """
        assert metrics.classify_temperature(value) == expected

    def test_classify_record(self):
        """
        测试用例：体温分级（传入记录）

        验证：
        - 从记录的 temperature 字段取值
        """
        assert metrics.classify_temperature({"temperature": Decimal("38.4")}) == "Fever"
        assert metrics.classify_temperature(None) == "No data"

    def test_classify_dispatch(self):
        """
        测试用例：classify 按类型分发

        验证：
        - 体重没有分级规则，返回 None
        """
        assert metrics.classify("temp", 36.6) == "Normal"
        assert metrics.classify(WEIGHT, {"weight": 70}) is None
        assert metrics.STATUS_LEVELS["Fever"] == "alert"


class TestRangeAverage:
    """近 N 天平均值测试类"""

    def test_range_average_window(self):
        """
        测试用例：range_average（窗口筛选）

        验证：
        - 只统计 [today - N, today] 内的记录
        - 窗口外的旧记录和未来日期的记录都不参与
        """
        # Arrange（准备）
        today = date(2024, 3, 20)
        entries = [
            {"entry_date": date(2024, 3, 25), "weight": Decimal("90.00")},
            {"entry_date": date(2024, 3, 20), "weight": Decimal("72.00")},
            {"entry_date": "2024-03-13", "weight": Decimal("73.00")},
            {"entry_date": date(2024, 3, 1), "weight": Decimal("80.00")},
        ]

        # Act（执行）
        weekly = metrics.range_average(entries, 7, "weight", today=today)
        monthly = metrics.range_average(entries, 30, "weight", today=today)

        # Assert（断言）
        assert weekly == {"weight": "72.5"}
        assert monthly == {"weight": "75.0"}

    def test_range_average_blood_pressure_fields(self):
        """
        测试用例：range_average（血压）

        验证：
        - 收缩压、舒张压分别求平均
        """
        today = date(2024, 3, 20)
        entries = [
            {"entry_date": date(2024, 3, 19), "systolic": 120, "diastolic": 80},
            {"entry_date": date(2024, 3, 18), "systolic": 130, "diastolic": 85},
        ]
        assert metrics.range_average(entries, 7, "bp", today=today) == {
            "systolic": "125.0",
            "diastolic": "82.5",
        }

    def test_range_average_empty_window(self):
        """
        测试用例：range_average（窗口内无数据）

        验证：
        - 返回 None
        """
        entries = [{"entry_date": date(2023, 1, 1), "temperature": Decimal("36.6")}]
        assert metrics.range_average(entries, 7, TEMPERATURE, today=date(2024, 3, 20)) is None


class TestFilters:
    """筛选与展示测试类"""

    def test_apply_entry_filters(self):
        """
        测试用例：apply_entry_filters

        验证：
        - 日期区间包含端点
        - 关键字匹配备注，不区分大小写
        - 保持原有顺序
        """
        # Arrange（准备）
        entries = [
            {"entry_date": date(2024, 3, 3), "systolic": 130, "diastolic": 85, "notes": "After Coffee"},
            {"entry_date": date(2024, 3, 2), "systolic": 118, "diastolic": 76, "notes": None},
            {"entry_date": date(2024, 3, 1), "systolic": 121, "diastolic": 79, "notes": "coffee"},
        ]

        # Act（执行）
        by_date = metrics.apply_entry_filters(entries, "bp", date_from="2024-03-02", date_to="2024-03-03")
        by_text = metrics.apply_entry_filters(entries, "bp", search="COFFEE")
        by_value = metrics.apply_entry_filters(entries, "bp", search="118")

        # Assert（断言）
        assert [e["entry_date"].day for e in by_date] == [3, 2]
        assert [e["entry_date"].day for e in by_text] == [3, 1]
        assert [e["entry_date"].day for e in by_value] == [2]

    def test_format_trend_value(self):
        """
        测试用例：format_trend_value

        验证：
        - 血压、体重、体温各自的展示格式
        - 无数据时返回 "no data"
        """
        assert metrics.format_trend_value("bp", {"systolic": 118, "diastolic": 76}) == "118/76 mmHg"
        assert metrics.format_trend_value("weight", {"weight": Decimal("72.50")}) == "72.5 kg"
        assert metrics.format_trend_value("temp", {"temperature": Decimal("36.6")}) == "36.6°C"
        assert metrics.format_trend_value("temp", None) == "no data"

    def test_latest_of(self):
        """
        测试用例：latest_of

        验证：
        - 返回第一个元素；空序列返回 None
        """
        assert metrics.latest_of(["newest", "older"]) == "newest"
        assert metrics.latest_of([]) is None
