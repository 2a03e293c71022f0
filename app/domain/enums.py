# app/domain/enums.py
from enum import Enum


class UserType(str, Enum):
    CLIENT = "CLIENT"
    ADMIN = "ADMIN"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"
    PIX = "PIX"


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PREPARING = "PREPARING"
    DELIVERING = "DELIVERING"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
