"""Built-in sample dataset written on first use so the store is never empty."""
import copy

from Eduledger.data.normalize import DEFAULT_SETTINGS, empty_aggregate

_STUDENTS = [
    {"id": "HV001", "name": "Nguyen Minh Anh", "status": "ACTIVE", "balance": 0,
     "parentName": "Nguyen Van Binh", "phone": "0901234567", "createdAt": "2024-01-08"},
    {"id": "HV002", "name": "Tran Bao Chau", "status": "ACTIVE", "balance": 0,
     "parentName": "Tran Thi Dung", "phone": "0912345678", "createdAt": "2024-02-15"},
    {"id": "HV003", "name": "Le Gia Huy", "status": "ACTIVE", "balance": 0,
     "parentName": "Le Van Khoa", "phone": "0923456789", "createdAt": "2024-03-02"},
    {"id": "HV004", "name": "Pham Thu Ha", "status": "INACTIVE", "balance": 0,
     "parentName": "Pham Van Long", "phone": "0934567890", "createdAt": "2023-09-20"},
]

_TEACHERS = [
    {"id": "GV001", "name": "Do Thi Mai", "status": "ACTIVE", "salaryType": "PER_SESSION",
     "rate": 200000, "subject": "English", "createdAt": "2023-08-01"},
    {"id": "GV002", "name": "Hoang Van Nam", "status": "ACTIVE", "salaryType": "MONTHLY",
     "rate": 8000000, "subject": "Mathematics", "createdAt": "2023-08-01"},
]

_STAFF = [
    {"id": "NV001", "name": "Vu Thanh Tam", "role": "MANAGER", "createdAt": "2023-08-01"},
    {"id": "NV002", "name": "Bui Ngoc Lan", "role": "ACCOUNTANT", "createdAt": "2023-10-01"},
]

_CLASSES = [
    {"id": "LH001", "name": "English Communication A1",
     "fee": {"type": "PER_SESSION", "amount": 100000},
     "studentIds": ["HV001", "HV002"], "teacherIds": ["GV001"], "schedule": "Mon, Wed 18:00"},
    {"id": "LH002", "name": "Math Grade 9",
     "fee": {"type": "MONTHLY", "amount": 1200000},
     "studentIds": ["HV002", "HV003"], "teacherIds": ["GV002"], "schedule": "Tue, Thu 17:30"},
]

_ATTENDANCE = [
    {"id": "ATT-SEED-1", "classId": "LH001", "studentId": "HV001", "date": "2024-05-06", "status": "PRESENT"},
    {"id": "ATT-SEED-2", "classId": "LH001", "studentId": "HV002", "date": "2024-05-06", "status": "LATE"},
    {"id": "ATT-SEED-3", "classId": "LH001", "studentId": "HV001", "date": "2024-05-08", "status": "PRESENT"},
    {"id": "ATT-SEED-4", "classId": "LH001", "studentId": "HV002", "date": "2024-05-08", "status": "ABSENT"},
]

_ANNOUNCEMENTS = [
    {"id": "ANN-SEED-1", "title": "Welcome", "content": "Summer timetable is now available.",
     "createdAt": "2024-05-01"},
]

_SETTINGS = {
    "centerName": "EduCenter Pro",
    "address": "12 Tran Hung Dao, Hanoi",
    "phone": "0241234567",
}


def build_sample_data():
    """Return a fresh deep copy of the sample aggregate."""
    data = empty_aggregate()
    data["students"] = copy.deepcopy(_STUDENTS)
    data["teachers"] = copy.deepcopy(_TEACHERS)
    data["staff"] = copy.deepcopy(_STAFF)
    data["classes"] = copy.deepcopy(_CLASSES)
    data["attendance"] = copy.deepcopy(_ATTENDANCE)
    data["announcements"] = copy.deepcopy(_ANNOUNCEMENTS)
    settings = copy.deepcopy(DEFAULT_SETTINGS)
    settings.update(copy.deepcopy(_SETTINGS))
    data["settings"] = settings
    return data
