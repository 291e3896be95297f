from datetime import date
from types import SimpleNamespace

import pytest
from igreja.models.attendance_session import AttendanceSession
from igreja.models.financial_transaction import FinancialTransaction, TransactionType
from igreja.models.member import Member, MemberStatus
from igreja.models.room import Room
from igreja.models.visitor import Visitor
from igreja.schemas.report_schemas import ReportPeriod
from igreja.services.report_service import ReportService, months_ago, period_start

TODAY = date(2026, 6, 15)


def add_session(db, church, room, when, present, absent):
    session = AttendanceSession(
        church_id=church.id,
        room_id=room.id if room else None,
        room_name=room.name if room else None,
        session_date=when,
        present_member_ids=[m.id for m in present],
        absent_member_ids=[m.id for m in absent],
        total_present=len(present),
        total_absent=len(absent),
        finalized=True,
    )
    db.add(session)
    db.commit()
    return session


@pytest.fixture
def roster(db_session, church):
    youth = Room(church_id=church.id, name="Jovens", age_group="Jovem")
    kids = Room(church_id=church.id, name="Crianças", age_group="Criança")
    db_session.add_all([youth, kids])
    db_session.commit()

    people = {
        name: Member(church_id=church.id, room_id=youth.id, full_name=name)
        for name in ("Ana Lima", "Beto Reis", "Caio Dias")
    }
    db_session.add_all(people.values())
    db_session.commit()
    return SimpleNamespace(youth=youth, kids=kids, **{name.split()[0].lower(): m for name, m in people.items()})


class TestPeriods:
    def test_months_ago(self):
        assert months_ago(date(2026, 6, 15), 1) == date(2026, 5, 15)
        assert months_ago(date(2026, 1, 10), 3) == date(2025, 10, 10)
        assert months_ago(date(2026, 3, 31), 1) == date(2026, 2, 28)
        assert months_ago(date(2024, 5, 31), 3) == date(2024, 2, 29)

    def test_period_start(self):
        assert period_start(ReportPeriod.TWELVE_MONTHS, TODAY) == date(2025, 6, 15)
        assert period_start(ReportPeriod.ALL, TODAY) is None


class TestAttendanceReport:
    def test_report_aggregates(self, db_session, church, roster):
        add_session(db_session, church, roster.youth, date(2026, 5, 3), [roster.ana, roster.beto], [roster.caio])
        add_session(db_session, church, roster.youth, date(2026, 6, 7), [roster.ana], [roster.beto, roster.caio])
        add_session(db_session, church, None, date(2026, 6, 14), [roster.caio], [])

        report = ReportService(db_session).attendance_report(
            SimpleNamespace(church=church), ReportPeriod.SIX_MONTHS, today=TODAY
        )

        assert report["total_sessions"] == 3
        assert report["total_present"] == 4
        assert report["total_absent"] == 3
        assert report["attendance_rate"] == 57.1
        assert report["monthly"] == [
            {"month": "2026-05", "present": 2, "absent": 1, "rate": 66.7},
            {"month": "2026-06", "present": 2, "absent": 2, "rate": 50.0},
        ]
        assert [(r["room_name"], r["sessions"]) for r in report["by_room"]] == [("Jovens", 2), ("Sem sala", 1)]
        assert [r["full_name"] for r in report["ranking"]] == ["Ana Lima", "Beto Reis", "Caio Dias"]
        assert report["ranking"][0]["rate"] == 100.0

    def test_period_window(self, db_session, church, roster):
        add_session(db_session, church, roster.youth, date(2026, 1, 4), [roster.ana], [])
        add_session(db_session, church, roster.youth, date(2026, 6, 7), [roster.beto], [])

        service = ReportService(db_session)
        context = SimpleNamespace(church=church)

        recent = service.attendance_report(context, ReportPeriod.ONE_MONTH, today=TODAY)
        assert recent["total_sessions"] == 1
        assert recent["start_date"] == date(2026, 5, 15)

        everything = service.attendance_report(context, ReportPeriod.ALL, today=TODAY)
        assert everything["total_sessions"] == 2
        assert everything["start_date"] is None

    def test_room_filter(self, db_session, church, roster):
        kid = Member(church_id=church.id, room_id=roster.kids.id, full_name="Davi Melo")
        db_session.add(kid)
        db_session.commit()
        add_session(db_session, church, roster.youth, date(2026, 6, 7), [roster.ana], [])
        add_session(db_session, church, roster.kids, date(2026, 6, 7), [kid], [])

        report = ReportService(db_session).attendance_report(
            SimpleNamespace(church=church), room_id=roster.kids.id, today=TODAY
        )

        assert [r["full_name"] for r in report["ranking"]] == ["Davi Melo"]

    def test_deleted_members_left_out_of_ranking(self, db_session, church, roster):
        add_session(db_session, church, roster.youth, date(2026, 6, 7), [roster.ana, roster.beto], [])
        db_session.delete(roster.beto)
        db_session.commit()

        report = ReportService(db_session).attendance_report(SimpleNamespace(church=church), today=TODAY)

        assert report["total_present"] == 2
        assert [r["full_name"] for r in report["ranking"]] == ["Ana Lima"]

    def test_report_endpoint(self, client, treasurer_headers):
        response = client.get("/api/acme/relatorios/attendance", params={"period": "all"}, headers=treasurer_headers)

        assert response.status_code == 200
        assert response.json()["total_sessions"] == 0
        assert response.json()["attendance_rate"] == 0.0

    def test_invalid_period(self, client, treasurer_headers):
        response = client.get("/api/acme/relatorios/attendance", params={"period": "2y"}, headers=treasurer_headers)
        assert response.status_code == 422


class TestDashboard:
    def test_dashboard_numbers(self, db_session, church, roster):
        roster.caio.status = MemberStatus.INACTIVE
        roster.ana.birth_date = date(1990, 6, 20)
        roster.beto.birth_date = date(1985, 6, 2)
        db_session.add_all(
            [
                Visitor(church_id=church.id, session_date=TODAY, name="Helena Reis"),
                Visitor(church_id=church.id, session_date=date(2026, 6, 1), name="Igor Paz"),
                FinancialTransaction(
                    church_id=church.id,
                    type=TransactionType.INCOME,
                    category="Dízimo",
                    amount=500,
                    transaction_date=date(2026, 6, 2),
                ),
                FinancialTransaction(
                    church_id=church.id,
                    type=TransactionType.EXPENSE,
                    category="Luz",
                    amount=120,
                    transaction_date=date(2026, 6, 5),
                ),
                FinancialTransaction(
                    church_id=church.id,
                    type=TransactionType.INCOME,
                    category="Oferta",
                    amount=300,
                    transaction_date=date(2026, 4, 2),
                ),
            ]
        )
        db_session.commit()
        add_session(db_session, church, roster.youth, date(2026, 6, 1), [roster.ana], [roster.beto])
        add_session(db_session, church, roster.youth, date(2026, 6, 8), [roster.ana, roster.beto], [])

        stats = ReportService(db_session).dashboard(SimpleNamespace(church=church), today=TODAY)

        assert stats["total_members"] == 3
        assert stats["active_members"] == 2
        assert stats["visitors_today"] == 1
        assert stats["last_session_date"] == date(2026, 6, 8)
        assert stats["last_session_present"] == 2
        assert stats["month_income"] == 500
        assert stats["month_expense"] == 120
        assert stats["balance"] == 680
        assert [m.full_name for m in stats["birthdays"]] == ["Beto Reis", "Ana Lima"]

    def test_dashboard_endpoint_empty(self, client, pastor_headers):
        response = client.get("/api/acme/dashboard", headers=pastor_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["last_session_date"] is None
        assert data["birthdays"] == []
        assert data["balance"] == 0
