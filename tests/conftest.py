import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-gradebook")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient

from gradebook.main import app
from gradebook.routers.deps import get_roster_repository
from gradebook.schemas.auth import Role
from gradebook.schemas.roster import Student, SubjectClass
from gradebook.services.portal import portal_registry
from gradebook.services.security import create_access_token


def make_student(student_id, name="นักเรียน ทดสอบ", collected=None, midterm=0, final=0, status="Normal", redeemed=0):
    return Student.model_validate(
        {
            "id": student_id,
            "name": name,
            "scores": {"collected": collected or [0] * 6, "midterm": midterm, "final": final},
            "status": status,
            "redeemedDraws": redeemed,
        }
    )


class FakeRosterRepository:
    """In-memory roster store; ``save_result`` may be a bool or an exception to raise."""

    def __init__(self, rosters, save_result=True):
        self.rosters = [roster.model_copy(deep=True) for roster in rosters]
        self.save_result = save_result
        self.saved = []

    def load_all(self):
        return [roster.model_copy(deep=True) for roster in self.rosters]

    def save_roster(self, class_id, students):
        self.saved.append((class_id, list(students)))
        if isinstance(self.save_result, Exception):
            raise self.save_result
        if self.save_result:
            self.rosters = [
                roster.model_copy(update={"students": list(students)}) if roster.id == class_id else roster
                for roster in self.rosters
            ]
        return self.save_result


@pytest.fixture()
def sample_rosters():
    history = SubjectClass(
        id="M5_History",
        name="ม.5 ประวัติศาสตร์",
        students=[
            # 60 + 10 + 10 = 80 -> grade 4, Chieftain (index 5)
            make_student("665001", "ด.ญ. มานี ใจดี", [10] * 6, 10, 10, redeemed=2),
            # 30 + 5 + 5 = 40 -> grade 0, Pathfinder (index 1)
            make_student("665002", "สมชาย รักเรียน", [5] * 6, 5, 5, redeemed=1),
            make_student("665003", "วีระ มั่นคง", [9] * 6, 18, 18, status="มส."),
        ],
    )
    social = SubjectClass(
        id="M5_Social",
        name="ม.5 สังคมศึกษา",
        students=[
            # 48 + 15 + 15 = 78 -> grade 3.5, Druid (index 4)
            make_student("665001", "ด.ญ. มานี ใจดี", [8] * 6, 15, 15),
        ],
    )
    return [history, social]


@pytest.fixture()
def fake_repo(sample_rosters):
    return FakeRosterRepository(sample_rosters)


@pytest.fixture()
def client(fake_repo):
    portal_registry.clear()
    app.dependency_overrides[get_roster_repository] = lambda: fake_repo
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        portal_registry.clear()


@pytest.fixture()
def teacher_headers():
    return {"Authorization": f"Bearer {create_access_token('teacher', Role.TEACHER)}"}


@pytest.fixture()
def student_headers():
    return {"Authorization": f"Bearer {create_access_token('665001', Role.STUDENT)}"}
