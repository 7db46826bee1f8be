"""
End-to-end runs of app.py through Streamlit's AppTest harness.
"""

import logging
import os

import pytest
import streamlit as st
from streamlit.testing.v1 import AppTest

from decisiondesk import pages
from decisiondesk.decisions import build_decision
from decisiondesk.storage import Storage, append_jsonl

APP = "../app.py"


def _app() -> AppTest:
    return AppTest.from_file(APP, default_timeout=30)


def _button(at: AppTest, label: str):
    return next(b for b in at.button if b.label == label)


def _raise(exc):
    def _fail(*args, **kwargs):
        raise exc

    return _fail


@pytest.mark.usefixtures("data_dir")
class TestApp:
    def test_first_run_shows_onboarding(self):
        at = _app().run()
        assert not at.exception
        assert at.session_state["view"] == "onboarding"
        assert at.title[0].value == "Welcome to DecisionDesk"

    def test_returning_user_lands_home(self, storage, sample_profile):
        storage.save_profile(sample_profile)
        at = _app().run()
        assert not at.exception
        assert at.session_state["view"] == "home"
        assert at.title[0].value.startswith("Hi Sam")

    def test_onboarding_completes_to_home(self, storage):
        at = _app().run()
        at.text_input(key="ob_name").input("Ada")
        _button(at, "Get started").click()
        at.run()
        assert not at.exception
        assert at.session_state["view"] == "home"
        assert storage.get_profile()["name"] == "Ada"

    def test_onboarding_without_name_stays(self, storage):
        at = _app().run()
        _button(at, "Get started").click()
        at.run()
        assert at.session_state["view"] == "onboarding"
        assert storage.get_profile() is None

    def test_theme_toggle_from_settings(self, storage, sample_profile):
        storage.save_profile(sample_profile)
        at = _app().run()
        at.button(key="home_settings").click().run()
        assert at.title[0].value == "Settings"
        at.button(key="settings_toggle_theme").click().run()
        assert not at.exception
        assert at.session_state["theme"] == "dark"
        assert storage.get_theme() == "dark"

    def test_blank_decision_title_raises_error_alert(self, storage, sample_profile):
        storage.save_profile(sample_profile)
        at = _app().run()
        at.button(key="home_new").click().run()
        at.button(key="df_analyze").click().run()
        assert not at.exception
        assert at.session_state["view"] == "new-decision"
        assert at.session_state["alert"]["type"] == "error"
        assert at.error[0].value.startswith("Give the decision a title")

    def test_analyze_then_back_does_not_save(self, storage, sample_profile):
        storage.save_profile(sample_profile)
        at = _app().run()
        at.button(key="home_new").click().run()
        at.text_input(key="df_title").input("Move to Lisbon").run()
        at.button(key="df_analyze").click().run()
        assert not at.exception
        assert at.session_state["view"] == "result"
        assert at.title[0].value == "Move to Lisbon"

        at.button(key="res_back").click().run()
        assert at.session_state["view"] == "home"
        assert storage.list_decisions() == []

    def test_analyze_then_save_persists(self, storage, sample_profile):
        storage.save_profile(sample_profile)
        at = _app().run()
        at.button(key="home_new").click().run()
        at.text_input(key="df_title").input("Move to Lisbon").run()
        at.button(key="df_analyze").click().run()
        at.button(key="res_save").click().run()
        assert not at.exception
        assert at.session_state["view"] == "home"
        assert [r["title"] for r in storage.list_decisions()] == ["Move to Lisbon"]

    def test_dismiss_alert(self, storage, sample_profile):
        storage.save_profile(sample_profile)
        at = _app().run()
        at.button(key="home_new").click().run()
        at.button(key="df_analyze").click().run()
        assert at.session_state["alert"] is not None

        at.button(key="alert_dismiss").click().run()
        assert at.session_state["alert"] is None
        assert len(at.error) == 0


@pytest.mark.usefixtures("data_dir")
class TestHistoryScreen:
    def _open_history(self, storage, sample_profile, *records) -> AppTest:
        storage.save_profile(sample_profile)
        for record in records:
            append_jsonl(storage.history_path, record)
        at = _app().run()
        at.button(key="home_history").click().run()
        assert at.title[0].value == "Decision history"
        return at

    def test_follow_up_saved(self, storage, sample_profile, sample_decision):
        at = self._open_history(storage, sample_profile, sample_decision)
        at.selectbox(key="fu_outcome_dec_test000001").set_value("Success")
        at.text_area(key="fu_notes_dec_test000001").input("took it")
        at.button(key="fu_save_dec_test000001").click().run()
        assert not at.exception
        follow_up = storage.list_decisions()[0]["follow_up"]
        assert follow_up["outcome"] == "Success"
        assert follow_up["notes"] == "took it"

    def test_follow_up_write_failure_is_reported(self, monkeypatch, storage, sample_profile, sample_decision):
        monkeypatch.setattr(Storage, "update_follow_up", _raise(OSError("disk full")))
        at = self._open_history(storage, sample_profile, sample_decision)
        at.selectbox(key="fu_outcome_dec_test000001").set_value("Success")
        at.button(key="fu_save_dec_test000001").click().run()
        assert not at.exception
        assert any(c.value == "Save follow-up failed: disk full" for c in at.caption)

    def test_delete_removes_record(self, storage, sample_profile, sample_decision):
        at = self._open_history(storage, sample_profile, sample_decision)
        at.button(key="del_dec_test000001").click().run()
        assert not at.exception
        assert storage.list_decisions() == []
        assert at.session_state["view"] == "history"

    def test_delete_failure_is_reported(self, monkeypatch, storage, sample_profile, sample_decision):
        monkeypatch.setattr(Storage, "delete_decision", _raise(OSError("read-only")))
        at = self._open_history(storage, sample_profile, sample_decision)
        at.button(key="del_dec_test000001").click().run()
        assert not at.exception
        assert at.error[0].value == "Delete failed: read-only"
        assert len(storage.list_decisions()) == 1

    def test_pdf_failure_is_reported(self, monkeypatch, storage, sample_profile, sample_decision):
        monkeypatch.setattr(pages, "write_pdf_report", _raise(OSError("no space left")))
        at = self._open_history(storage, sample_profile, sample_decision)
        at.button(key="pdf_gen_dec_test000001").click().run()
        assert not at.exception
        assert at.error[0].value == "PDF report failed: no space left"

    def test_record_without_id_gets_its_pdf(self, storage, sample_profile):
        record = build_decision("go_no_go", "Old entry")
        del record["decision_id"]
        at = self._open_history(storage, sample_profile, record)

        at.button(key="pdf_gen_legacy_0").click().run()
        assert not at.exception
        path = at.session_state["pdf_path_legacy_0"]
        assert os.path.exists(path)
        assert "pdf_gen_legacy_0" not in [b.key for b in at.button]

    def test_record_without_id_cannot_be_deleted(self, storage, sample_profile):
        record = build_decision("go_no_go", "Old entry")
        del record["decision_id"]
        at = self._open_history(storage, sample_profile, record)
        assert "del_legacy_0" not in [b.key for b in at.button]
        assert any("without an id" in c.value for c in at.caption)


@pytest.mark.usefixtures("data_dir")
class TestResultSaveFailure:
    def test_history_write_failure_stays_on_result(self, storage, sample_profile):
        storage.save_profile(sample_profile)
        at = _app().run()
        at.button(key="home_new").click().run()
        at.text_input(key="df_title").input("Move to Lisbon").run()
        at.button(key="df_analyze").click().run()

        os.makedirs(storage.history_path)
        at.button(key="res_save").click().run()
        assert not at.exception
        assert at.session_state["view"] == "result"
        assert at.error[0].value.startswith("Save to history failed:")


@pytest.mark.usefixtures("data_dir")
class TestCrashContainment:
    @pytest.fixture
    def crash_home_once(self, monkeypatch):
        calls = []
        real_page_home = pages.page_home

        def page_home(user_profile, on_navigate):
            calls.append(1)
            if len(calls) == 1:
                st.title("Half drawn home")
                st.button("Ghost", key="ghost")
                raise RuntimeError("home exploded")
            return real_page_home(user_profile, on_navigate)

        monkeypatch.setattr(pages, "page_home", page_home)
        return calls

    def test_crash_replaces_the_screen_with_the_fallback(self, storage, sample_profile, crash_home_once):
        storage.save_profile(sample_profile)
        at = _app().run()
        assert not at.exception
        assert [t.value for t in at.title] == []
        assert [b.key for b in at.button] == ["boundary_reload"]
        assert any(m.value == "## Something went wrong" for m in at.markdown)
        assert at.session_state["_error_boundary"]["error"] == "home exploded"

    def test_failed_app_stays_failed(self, storage, sample_profile, crash_home_once):
        storage.save_profile(sample_profile)
        at = _app().run()
        at.run()
        assert crash_home_once == [1]
        assert [b.key for b in at.button] == ["boundary_reload"]

    def test_reload_starts_over_from_hydration(self, storage, sample_profile, crash_home_once):
        storage.save_profile(sample_profile)
        at = _app().run()
        at.button(key="boundary_reload").click().run()
        assert not at.exception
        assert "_error_boundary" not in at.session_state
        assert at.session_state["view"] == "home"
        assert at.title[0].value.startswith("Hi Sam")
        assert crash_home_once == [1, 1]


@pytest.mark.usefixtures("data_dir")
class TestShellGuard:
    def test_storage_failure_renders_critical_error(self, monkeypatch, caplog):
        monkeypatch.setattr(Storage, "get_profile", _raise(OSError("disk unavailable")))
        with caplog.at_level(logging.ERROR, logger="decisiondesk"):
            at = _app().run()
        assert not at.exception
        assert at.error[0].value == "Critical Error: disk unavailable"
        assert "_error_boundary" not in at.session_state
        assert at.session_state["view"] == "loading"
        assert "App component error" in caplog.text
