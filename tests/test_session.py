"""Tests for the session state machine: probe, login and logout."""

from unittest.mock import patch

from tasksync.engine import loader


class TestProbe:
    """Test the startup session probe."""

    def test_existing_session_restored(self, engine, seeded_backend):
        """Test that a live cookie session goes straight to the task list."""
        seeded_backend.logged_in = "alice"
        engine.start()
        state = engine.state
        assert state.session_status == "authenticated"
        assert state.user.username == "alice"
        assert [t.id for t in state.tasks] == [3, 5, 7]
        assert seeded_backend.routes() == ["GET /auth/me", "GET /tasks"]

    def test_unauthenticated_probe_is_anonymous(self, engine, backend):
        engine.start()
        assert engine.state.session_status == "anonymous"
        assert engine.state.user is None
        assert engine.state.error is None
        assert backend.routes() == ["GET /auth/me"]

    def test_probe_transport_failure_is_anonymous(self, engine, backend):
        """Test that an unreachable server shows the login view, not an error."""
        backend.fail_transport_next("GET /auth/me")
        engine.start()
        assert engine.state.session_status == "anonymous"
        assert engine.state.error is None

    def test_null_user_is_anonymous(self, engine, backend):
        backend.respond_next("GET /auth/me", 200, {"user": None})
        engine.start()
        assert engine.state.session_status == "anonymous"


class TestLogin:
    """Test login."""

    def test_successful_login(self, engine, seeded_backend):
        assert engine.login("alice", "secret")
        state = engine.state
        assert state.session_status == "authenticated"
        assert state.user.username == "alice"
        assert state.auth_error is None
        assert state.flash.message == "Welcome back!"
        assert len(state.tasks) == 3
        assert seeded_backend.routes() == ["POST /auth/login", "GET /auth/me", "GET /tasks"]
        assert seeded_backend.calls[0].body == {"username": "alice", "password": "secret"}

    def test_wrong_password_is_invalid_credentials(self, engine, backend):
        assert not engine.login("alice", "nope")
        assert engine.state.auth_error == "Invalid credentials"
        assert engine.state.user is None
        assert backend.routes() == ["POST /auth/login"]

    def test_other_failure_uses_server_message(self, engine, backend):
        backend.respond_next("POST /auth/login", 503, {"error": "Maintenance"})
        assert not engine.login("alice", "secret")
        assert engine.state.auth_error == "Maintenance"

    def test_transport_failure(self, engine, backend):
        backend.fail_transport_next("POST /auth/login")
        assert not engine.login("alice", "secret")
        assert engine.state.auth_error.startswith("Network error")

    def test_login_without_user_from_me(self, engine, backend):
        backend.on_request = lambda call: (
            backend.respond_next("GET /auth/me", 200, {"user": None}) if call.route == "POST /auth/login" else None
        )
        assert not engine.login("alice", "secret")
        assert engine.state.auth_error == "Login failed"
        assert engine.state.session_status == "anonymous"

    def test_new_attempt_clears_previous_error(self, engine, backend):
        engine.login("alice", "nope")
        seen = []
        engine.subscribe(lambda state: seen.append(state.auth_error))
        engine.login("alice", "secret")
        assert seen[0] is None
        assert engine.state.auth_error is None

    def test_login_while_authenticated_ignored(self, logged_in_engine, seeded_backend):
        assert not logged_in_engine.login("alice", "secret")
        assert seeded_backend.calls == []


class TestLogout:
    """Test that logout wipes all per-user state."""

    def test_logout_clears_everything(self, logged_in_engine, seeded_backend):
        engine = logged_in_engine
        engine.select_task(3)
        engine.start_edit_task()
        engine.set_filters(search="report")
        epoch = engine.state.session_epoch

        engine.logout()

        state = engine.state
        assert state.session_status == "anonymous"
        assert state.user is None
        assert state.tasks == ()
        assert state.subtasks == ()
        assert state.selected_task_id is None
        assert state.form_open is False
        assert state.editing_task is None
        assert state.session_epoch == epoch + 1
        assert seeded_backend.logged_in is None

    def test_logout_clears_state_when_request_fails(self, logged_in_engine, seeded_backend):
        seeded_backend.respond_next("POST /auth/logout", 500, {"error": "boom"})
        logged_in_engine.logout()
        assert logged_in_engine.state.user is None
        assert logged_in_engine.state.tasks == ()
        assert logged_in_engine.state.error is None

    def test_logout_on_transport_failure(self, logged_in_engine, seeded_backend):
        seeded_backend.fail_transport_next("POST /auth/logout")
        logged_in_engine.logout()
        assert logged_in_engine.state.session_status == "anonymous"

    def test_next_user_does_not_see_previous_tasks(self, logged_in_engine, seeded_backend):
        """Test that the task list is empty between logout and the next load."""
        engine = logged_in_engine
        engine.logout()
        seeded_backend.users["bob"] = {"id": 2, "username": "bob"}
        seeded_backend.passwords["bob"] = "pw"
        snapshots = []
        engine.subscribe(snapshots.append)

        seeded_backend.respond_next("GET /tasks", 200, [])
        engine.login("bob", "pw")

        assert all(s.tasks == () for s in snapshots)
        assert engine.state.user.username == "bob"

    def test_response_after_logout_discarded(self, engine, seeded_backend, scheduler):
        """Test that a task list arriving after logout is dropped."""
        assert engine.login("alice", "secret")
        original = seeded_backend._route

        def logout_mid_request(call):
            if call.route == "GET /tasks":
                engine.store.reset_session()
            return original(call)

        seeded_backend._route = logout_mid_request
        assert not engine.refresh()
        assert engine.state.tasks == ()
        assert engine.state.loading is False
        assert engine.state.error is None

    def test_logout_between_check_and_store_discards_list(self, logged_in_engine, seeded_backend):
        """Test that a logout landing while the list is being parsed keeps the store empty."""
        engine = logged_in_engine
        real_parse = loader.parse_items

        def parse_then_logout(payload, model):
            items = real_parse(payload, model)
            engine.store.reset_session()
            return items

        with patch("tasksync.engine.loader.parse_items", side_effect=parse_then_logout):
            assert not engine.refresh()

        assert engine.state.user is None
        assert engine.state.tasks == ()
        assert engine.state.selected_task_id is None
