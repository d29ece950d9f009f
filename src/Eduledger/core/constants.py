from enum import Enum


class PersonStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class FeeType(str, Enum):
    MONTHLY = "MONTHLY"
    PER_SESSION = "PER_SESSION"
    PER_COURSE = "PER_COURSE"


class SalaryType(str, Enum):
    MONTHLY = "MONTHLY"
    PER_SESSION = "PER_SESSION"


class AttendanceStatus(str, Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    UNMARKED = "UNMARKED"


class InvoiceStatus(str, Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class TransactionType(str, Enum):
    INVOICE = "INVOICE"
    PAYMENT = "PAYMENT"
    ADJUSTMENT_CREDIT = "ADJUSTMENT_CREDIT"
    ADJUSTMENT_DEBIT = "ADJUSTMENT_DEBIT"


class AdjustmentType(str, Enum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    ACCOUNTANT = "ACCOUNTANT"
    TEACHER = "TEACHER"
    PARENT = "PARENT"


# Attendance statuses that count as an attended (billable) session
ATTENDED_STATUSES = {AttendanceStatus.PRESENT.value, AttendanceStatus.LATE.value}
