"""
数据库模型模块
"""
from healthlog.infrastructure.database.models.blood_pressure import BloodPressureRecord
from healthlog.infrastructure.database.models.weight import WeightRecord
from healthlog.infrastructure.database.models.temperature import TemperatureRecord
from healthlog.infrastructure.database.models.document import DocumentRecord
from healthlog.infrastructure.database.models.user import User

__all__ = [
    "BloodPressureRecord",
    "WeightRecord",
    "TemperatureRecord",
    "DocumentRecord",
    "User",
]
