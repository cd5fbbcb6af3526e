from datetime import date, timedelta

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from holidays.enums import HolidaySource, SourceType, StaffScope
from holidays.models import AcademicHoliday, CalendarSource
from holidays.services import sync as sync_module
from holidays.services.blocking import is_date_blocked
from holidays.services.sync import CalendarSyncService, build_url, detect_source_type

pytestmark = pytest.mark.django_db

HOLIDAYS = "/api/holidays/"
SOURCES = "/api/holidays/sources/"


def _unreachable(url, timeout):
    raise OSError("network unreachable")


def _service(**kwargs):
    kwargs.setdefault("base_urls", [])
    kwargs.setdefault("http_head", _unreachable)
    kwargs.setdefault("http_get", _unreachable)
    return CalendarSyncService(**kwargs)


# =============================================================================
# Helpers
# =============================================================================

def test_build_url_and_source_type():
    assert build_url("https://u.test/cal_{year}_{next_year}.pdf", 2025) == "https://u.test/cal_2025_2026.pdf"
    assert detect_source_type("https://u.test/a.PDF") == SourceType.PDF
    assert detect_source_type("https://u.test/feed.json") == SourceType.API
    assert detect_source_type("https://u.test/calendar") == SourceType.HTML


# =============================================================================
# sync
# =============================================================================

def test_national_holidays_survive_a_dead_network():
    result = _service(base_urls=["https://cal.test/docs"]).sync(2025)
    assert result == {"synced": 6, "updated": 0, "failed": 0, "sources_checked": 0, "new_calendars_found": 0}
    assert AcademicHoliday.objects.for_year(2025).filter(source=HolidaySource.NATIONAL).count() == 6
    assert AcademicHoliday.objects.filter(name="Republic Day", start_date=date(2025, 10, 29)).exists()


def test_second_sync_updates_instead_of_duplicating():
    _service().sync(2025)
    result = _service().sync(2025)
    assert result["synced"] == 0
    assert result["updated"] == 6
    assert AcademicHoliday.objects.count() == 6


def test_manual_fallback_when_nothing_is_found():
    result = _service(include_national=False).sync(2025)
    assert result["synced"] == 1
    holiday = AcademicHoliday.objects.get()
    assert holiday.name == "Year-End University Closure"
    assert holiday.source == HolidaySource.MANUAL_FALLBACK


def test_html_source_is_parsed():
    source = CalendarSource.objects.create(
        name="Registrar", url_pattern="https://cal.test/calendar-{year}.html", type=SourceType.HTML
    )
    fetched = []

    def fake_get(url, timeout):
        fetched.append(url)
        return "<html><body><p>Güz Tatili 20.01.2025</p></body></html>".encode("utf-8")

    result = _service(http_get=fake_get).sync(2024)
    assert fetched == ["https://cal.test/calendar-2024.html"]
    assert result["sources_checked"] == 1
    assert result["synced"] == 7

    brk = AcademicHoliday.objects.get(name="Academic Break 2025-01-20")
    assert brk.source == HolidaySource.PDF_SYNC
    assert brk.affects_staff_type == StaffScope.ACADEMIC

    source.refresh_from_db()
    assert source.consecutive_failures == 0
    assert source.last_successful_sync is not None
    assert source.sync_metadata == {
        "url": "https://cal.test/calendar-2024.html", "year": 2024, "holidays_found": 1,
    }


def test_unreadable_pdf_marks_the_source_failed():
    source = CalendarSource.objects.create(name="Broken", url_pattern="https://cal.test/cal_{year}.pdf")
    result = _service(http_get=lambda url, timeout: b"not a pdf").sync(2025)
    assert result["synced"] == 6
    source.refresh_from_db()
    assert source.consecutive_failures == 1
    assert source.last_error
    assert source.is_active


def test_sources_are_disabled_after_repeated_failures():
    source = CalendarSource.objects.create(
        name="Flaky", url_pattern="https://cal.test/cal_{year}.pdf", consecutive_failures=4
    )
    _service().sync(2025)
    source.refresh_from_db()
    assert source.consecutive_failures == CalendarSource.MAX_FAILURES
    assert not source.is_active
    assert not source.is_reliable

    # inactive sources are no longer fetched
    assert _service().sync(2025)["sources_checked"] == 0


def test_one_bad_row_does_not_stop_the_sync(monkeypatch):
    service = _service()
    real_upsert = service.upsert

    def flaky_upsert(data):
        if data["name"] == "Victory Day":
            raise ValueError("bad row")
        return real_upsert(data)

    monkeypatch.setattr(service, "upsert", flaky_upsert)
    result = service.sync(2025)
    assert result["failed"] == 1
    assert result["synced"] == 5


# =============================================================================
# Discovery
# =============================================================================

def test_discovery_records_reachable_calendars():
    tried = []

    def fake_head(url, timeout):
        tried.append(url)
        return 200 if url.endswith("academic_calendar_2025.pdf") else 404

    service = _service(base_urls=["https://cal.test/docs/"], http_head=fake_head)
    assert service.discover(2025) == 1
    assert len(tried) == len(sync_module.FILE_TEMPLATES)

    source = CalendarSource.objects.get()
    assert source.url_pattern == "https://cal.test/docs/academic_calendar_{year}.pdf"
    assert source.auto_discovered
    assert source.type == SourceType.PDF
    assert source.priority == 3

    # found again next time, not duplicated
    service.discover(2025)
    assert CalendarSource.objects.count() == 1


def test_url_exists_treats_errors_as_missing():
    assert _service().url_exists("https://cal.test/x.pdf") is False
    assert _service(http_head=lambda url, timeout: 301).url_exists("https://cal.test/x.pdf") is False
    assert _service(http_head=lambda url, timeout: 204).url_exists("https://cal.test/x.pdf") is True


# =============================================================================
# Blocking
# =============================================================================

@pytest.fixture
def spring_break():
    return AcademicHoliday.objects.create(
        name="Spring Break",
        start_date=date(2025, 4, 14),
        end_date=date(2025, 4, 18),
        academic_year=2025,
        affects_staff_type=StaffScope.ACADEMIC,
    )


def test_is_date_blocked(spring_break):
    assert is_date_blocked(date(2025, 4, 16)) == spring_break
    assert is_date_blocked(date(2025, 4, 18)) == spring_break
    assert is_date_blocked(date(2025, 4, 19)) is None
    assert is_date_blocked(date(2025, 4, 16), staff_type=StaffScope.ACADEMIC) == spring_break
    assert is_date_blocked(date(2025, 4, 16), staff_type=StaffScope.CLINICAL) is None


def test_inactive_and_non_blocking_holidays_do_not_block(spring_break):
    spring_break.is_active = False
    spring_break.save()
    assert is_date_blocked(date(2025, 4, 16)) is None

    AcademicHoliday.objects.create(
        name="Exams", start_date=date(2025, 4, 16), end_date=date(2025, 4, 16),
        academic_year=2025, blocks_appointments=False,
    )
    assert is_date_blocked(date(2025, 4, 16)) is None


def test_holidays_scoped_to_nobody_do_not_block():
    AcademicHoliday.objects.create(
        name="Open Day", start_date=date(2025, 5, 2), end_date=date(2025, 5, 2),
        academic_year=2025, affects_staff_type=StaffScope.NONE,
    )
    assert is_date_blocked(date(2025, 5, 2)) is None


def test_holiday_helpers(spring_break):
    assert spring_break.duration_days == 5
    assert spring_break.is_active_on(date(2025, 4, 14))
    assert not spring_break.is_active_on(date(2025, 4, 13))
    assert spring_break.affects_staff(StaffScope.ACADEMIC)
    assert not spring_break.affects_staff(StaffScope.CLINICAL)
    assert list(AcademicHoliday.objects.for_range(date(2025, 4, 1), date(2025, 4, 14))) == [spring_break]


# =============================================================================
# Command
# =============================================================================

def test_sync_calendar_command(capsys):
    call_command("sync_calendar", "2025")
    out = capsys.readouterr().out
    assert "Starting calendar sync for year: 2025" in out
    assert "- New holidays synced: 6" in out
    assert AcademicHoliday.objects.for_year(2025).count() == 6


def test_sync_calendar_command_fails_loudly(monkeypatch):
    def boom(self, year=None):
        raise RuntimeError("database is read-only")

    monkeypatch.setattr(CalendarSyncService, "sync", boom)
    with pytest.raises(CommandError, match="database is read-only"):
        call_command("sync_calendar", "2025")


# =============================================================================
# API
# =============================================================================

def test_anyone_signed_in_can_list(auth_client, student, spring_break):
    res = auth_client(student).get(HOLIDAYS, {"year": 2025})
    assert res.status_code == 200
    assert [h["name"] for h in res.json()] == ["Spring Break"]
    assert res.json()[0]["duration_days"] == 5


def test_only_admins_write(auth_client, student, admin_user):
    payload = {"name": "Founders Day", "start_date": "2025-06-02", "end_date": "2025-06-02"}
    assert auth_client(student).post(HOLIDAYS, payload, format="json").status_code == 403

    res = auth_client(admin_user).post(HOLIDAYS, payload, format="json")
    assert res.status_code == 201, res.data
    assert res.json()["academic_year"] == 2025
    assert res.json()["source"] == HolidaySource.MANUAL

    dup = auth_client(admin_user).post(HOLIDAYS, payload, format="json")
    assert dup.status_code == 422
    assert "name" in dup.json()["errors"]


def test_end_before_start_is_rejected(auth_client, admin_user):
    res = auth_client(admin_user).post(
        HOLIDAYS, {"name": "Backwards", "start_date": "2025-06-05", "end_date": "2025-06-01"}, format="json"
    )
    assert res.status_code == 422
    assert "end_date" in res.json()["errors"]


def test_check_endpoint(auth_client, student, spring_break):
    client = auth_client(student)
    body = client.get(f"{HOLIDAYS}check/", {"date": "2025-04-15"}).json()
    assert body["blocked"] is True
    assert body["holiday"]["name"] == "Spring Break"

    body = client.get(f"{HOLIDAYS}check/", {"date": "2025-04-15", "staff_type": "clinical"}).json()
    assert body == {"date": "2025-04-15", "blocked": False, "holiday": None}

    assert client.get(f"{HOLIDAYS}check/").status_code == 422


def test_sync_endpoint(auth_client, admin_user, student):
    assert auth_client(student).post(f"{HOLIDAYS}sync/", {"year": 2025}, format="json").status_code == 403
    res = auth_client(admin_user).post(f"{HOLIDAYS}sync/", {"year": 2025}, format="json")
    assert res.status_code == 200
    assert res.json()["year"] == 2025
    assert res.json()["synced"] == 6


def test_source_endpoints(auth_client, admin_user, monkeypatch):
    monkeypatch.setattr(sync_module, "_http_head", lambda url, timeout: 200)
    client = auth_client(admin_user)

    res = client.post(
        SOURCES, {"name": "Registrar", "url_pattern": "https://cal.test/cal_{year}.pdf", "type": "pdf"}, format="json"
    )
    assert res.status_code == 201, res.data
    assert res.json()["is_reliable"] is True

    res = client.post(f"{SOURCES}{res.json()['id']}/test/", {"year": 2026}, format="json")
    assert res.json() == {"url": "https://cal.test/cal_2026.pdf", "reachable": True}


def test_sources_are_admin_only(auth_client, nurse):
    assert auth_client(nurse).get(SOURCES).status_code == 403


def test_last_year_holidays_filter(auth_client, student):
    AcademicHoliday.objects.create(
        name="Old", start_date=date(2024, 1, 1), end_date=date(2024, 1, 1) + timedelta(days=1), academic_year=2024
    )
    assert auth_client(student).get(HOLIDAYS, {"year": 2025}).json() == []
