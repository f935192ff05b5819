"""
tests/core/explorer/test_session.py - 탐색 세션 상태 머신 테스트

뷰 전환, 단축키, 필터, 컬럼 선택, 액션 프로토콜(확인/재시도/타임아웃/감사),
상세 패널과 렌더링을 검증합니다.
"""

from datetime import timedelta

import pytest

from core.exceptions import (
    ActionExecutionError,
    ActionTimeoutError,
    ConfirmationRequiredError,
    ErrorCategory,
    FilterCompileError,
    InvalidActionError,
    InvalidColumnsError,
    NoPreviousViewError,
    ReadOnlyError,
    UnknownResourceError,
    UnsupportedHotKeyError,
)
from core.explorer.actions import RetryConfig
from core.explorer.session import Session, clamp_index, folder_scope_key
from core.explorer.types import ResourceKind


def statuses(session):
    return [transition.status for transition in session.action_transitions()]


class TestHelpers:
    def test_clamp_index(self):
        assert clamp_index(5, 3) == 2
        assert clamp_index(-1, 3) == 0
        assert clamp_index(4, 0) == 0

    def test_folder_scope_key(self):
        assert folder_scope_key("/dc-1/vm/prod/") == "prod"
        assert folder_scope_key(" / ") == ""


# =============================================================================
# 뷰 전환
# =============================================================================


class TestViewSwitching:
    """':' 명령 전환 테스트"""

    def test_initial_state(self, session):
        assert session.resource is ResourceKind.VM
        assert session.selected_id() == "vm-a"
        assert session.previous_resource is None

    def test_switch_resets_state(self, rich_session):
        rich_session.handle_key("J")
        rich_session.handle_key("SPACE")
        rich_session.handle_key("N")
        rich_session.apply_filter_expression("vm")

        rich_session.execute_command(":host")

        assert rich_session.resource is ResourceKind.HOST
        assert rich_session.previous_resource is ResourceKind.VM
        assert (rich_session.selected_row, rich_session.selected_column) == (0, 0)
        assert rich_session.sort_column == ""
        assert rich_session.filter_text == ""
        assert rich_session.mark_count == 0

    def test_invalid_command_keeps_view(self, session):
        with pytest.raises(UnknownResourceError):
            session.execute_command(":vmz")
        assert session.resource is ResourceKind.VM

    def test_last_view_toggles(self, session):
        session.execute_command(":host")
        session.last_view()
        assert session.resource is ResourceKind.VM
        session.last_view()
        assert session.resource is ResourceKind.HOST

    def test_last_view_without_history(self, session):
        with pytest.raises(NoPreviousViewError):
            session.last_view()

    def test_same_view_does_not_change_previous(self, session):
        session.execute_command(":vms")
        assert session.previous_resource is None


# =============================================================================
# 단축키
# =============================================================================


class TestNavigationKeys:
    """행/컬럼 이동 테스트"""

    def test_rows_wrap(self, rich_session):
        rich_session.handle_key("K")
        assert rich_session.selected_id() == "prod-db"
        rich_session.handle_key("DOWN")
        assert rich_session.selected_id() == "vm-a"

    def test_columns_wrap(self, session):
        session.handle_key("SHIFT+LEFT")
        assert session.selected_column == len(session.visible_columns()) - 1
        session.handle_key("RIGHT")
        assert session.selected_column == 0

    def test_unknown_key(self, session):
        with pytest.raises(UnsupportedHotKeyError):
            session.handle_key("X")

    def test_blank_key_is_ignored(self, session):
        session.handle_key("   ")
        assert session.selected_row == 0


class TestSortKeys:
    """정렬 단축키 테스트"""

    def test_hotkey_sorts_and_toggles(self, rich_session):
        rich_session.handle_key("N")
        assert rich_session.current_view().ids == ["prod-db", "vm-a", "vm-b"]
        assert (rich_session.sort_column, rich_session.sort_ascending) == ("NAME", True)
        rich_session.handle_key("N")
        assert rich_session.current_view().ids == ["vm-b", "vm-a", "prod-db"]
        assert rich_session.sort_ascending is False

    def test_sort_by_selected_column(self, rich_session):
        rich_session.handle_key("RIGHT")
        rich_session.handle_key("SHIFT+O")
        assert rich_session.sort_column == "POWER"
        assert rich_session.current_view().ids[0] == "vm-b"

    def test_invert_sort(self, rich_session):
        rich_session.handle_key("N")
        rich_session.handle_key("SHIFT+I")
        assert rich_session.sort_ascending is False
        assert rich_session.current_view().ids[0] == "vm-b"

    def test_invert_without_sort(self, session):
        with pytest.raises(UnsupportedHotKeyError):
            session.handle_key("SHIFT+I")

    def test_sort_moves_selected_column(self, session):
        session.handle_key("C")
        assert session.visible_columns()[session.selected_column] == "CLUSTER"


class TestMarkKeys:
    """마크 단축키 테스트"""

    def test_toggle_with_literal_space(self, session):
        session.handle_key(" ")
        assert session.is_marked("vm-a")
        session.handle_key("SPACE")
        assert not session.is_marked("vm-a")

    def test_span_and_clear(self, rich_session):
        rich_session.handle_key("SPACE")
        rich_session.handle_key("J")
        rich_session.handle_key("J")
        rich_session.handle_key("CTRL+SPACE")
        assert rich_session.mark_count == 3
        rich_session.handle_key("CTRL+\\")
        assert rich_session.mark_count == 0

    def test_marks_survive_sort(self, rich_session, executor):
        rich_session.handle_key("J")
        rich_session.handle_key("SPACE")
        rich_session.handle_key("N")
        assert rich_session.is_marked("vm-b")
        rich_session.apply_action("power-on", executor)
        assert executor.calls == [(ResourceKind.VM, "power-on", ["vm-b"])]


class TestJumpKeys:
    """SHIFT+J / SHIFT+W 이동 테스트"""

    def test_jump_to_host(self, rich_session):
        rich_session.handle_key("SHIFT+J")
        assert rich_session.resource is ResourceKind.HOST
        assert rich_session.selected_id() == "esxi-01"

    def test_jump_to_resource_pool(self, rich_session):
        rich_session.handle_key("J")
        rich_session.handle_key("SHIFT+J")
        assert rich_session.resource is ResourceKind.RESOURCE_POOL
        assert rich_session.selected_id() == "rp-west"

    def test_jump_without_owner(self, session):
        with pytest.raises(UnsupportedHotKeyError):
            session.handle_key("SHIFT+J")

    def test_jump_outside_vm_view(self, session):
        session.execute_command(":host")
        with pytest.raises(UnsupportedHotKeyError):
            session.handle_key("SHIFT+J")

    @pytest.mark.parametrize("command", [":folder", ":tag"])
    def test_warp_to_scoped_vms(self, rich_session, command):
        rich_session.execute_command(command)
        rich_session.handle_key("SHIFT+W")
        assert rich_session.resource is ResourceKind.VM
        assert rich_session.filter_text == "prod"
        assert rich_session.current_view().ids == ["prod-db"]

    def test_warp_from_other_view(self, session):
        session.execute_command(":host")
        with pytest.raises(UnsupportedHotKeyError):
            session.handle_key("SHIFT+W")


# =============================================================================
# 필터 / 컬럼
# =============================================================================


class TestFilters:
    """'/' 필터 테스트"""

    def test_regex_by_default(self, rich_session):
        rich_session.apply_filter_expression("^vm-")
        assert rich_session.current_view().ids == ["vm-a", "vm-b"]
        assert rich_session.filter_text == "^vm-"

    def test_inverse_regex(self, rich_session):
        rich_session.apply_filter_expression("!^vm-")
        assert rich_session.current_view().ids == ["prod-db"]
        assert rich_session.filter_text == "!^vm-"

    def test_clear(self, rich_session):
        rich_session.apply_filter_expression("vm-b")
        rich_session.apply_filter_expression("")
        assert rich_session.current_view().ids == ["vm-a", "vm-b", "prod-db"]

    def test_filter_keeps_active_sort(self, rich_session):
        rich_session.handle_key("N")
        rich_session.handle_key("N")
        rich_session.apply_filter_expression("^vm-")
        assert rich_session.current_view().ids == ["vm-b", "vm-a"]
        assert (rich_session.sort_column, rich_session.sort_ascending) == ("NAME", False)

    def test_clear_after_sort_restores_sorted_order(self, rich_session):
        rich_session.handle_key("N")
        before = rich_session.current_view().ids
        rich_session.apply_filter_expression("vm-b")
        rich_session.apply_filter_expression("")
        assert rich_session.current_view().ids == before == ["prod-db", "vm-a", "vm-b"]

    def test_substring_clear_after_sort(self, rich_session):
        rich_session.handle_key("N")
        rich_session.apply_filter("east")
        assert rich_session.current_view().ids == ["prod-db", "vm-a"]
        rich_session.apply_filter("")
        assert rich_session.current_view().ids == ["prod-db", "vm-a", "vm-b"]

    def test_invalid_regex_keeps_view(self, rich_session):
        rich_session.apply_filter_expression("vm-b")
        with pytest.raises(FilterCompileError):
            rich_session.apply_filter_expression("[")
        assert rich_session.current_view().ids == ["vm-b"]

    def test_tag_filter(self, rich_session):
        rich_session.execute_command(":host")
        rich_session.apply_filter_expression("-t ENV=prod")
        assert rich_session.current_view().ids == ["esxi-01"]
        assert rich_session.filter_text == "-t env=prod"

    def test_tag_filter_without_tags_column(self, session):
        session.apply_filter_expression("-t env=prod")
        assert session.current_view().rows == []

    def test_fuzzy_filter(self, session):
        session.execute_command(":host")
        session.apply_filter_expression("-f e02")
        assert session.current_view().ids == ["esxi-02"]

    def test_empty_fuzzy_filter(self, session):
        with pytest.raises(InvalidActionError):
            session.apply_filter_expression("-f")

    def test_substring_filter(self, session):
        session.apply_filter("  WEST ")
        assert session.filter_text == "west"
        assert session.current_view().ids == ["vm-b"]

    def test_filter_clamps_selection(self, rich_session):
        rich_session.handle_key("K")
        rich_session.apply_filter_expression("vm-a")
        assert rich_session.selected_row == 0

    def test_next_previous_match(self, rich_session):
        rich_session.apply_filter_expression("vm")
        rich_session.handle_key("n")
        assert rich_session.selected_id() == "vm-b"
        rich_session.handle_key("N")
        assert rich_session.selected_id() == "vm-a"

    def test_n_without_filter_sorts(self, rich_session):
        rich_session.handle_key("n")
        assert rich_session.sort_column == "NAME"


class TestColumns:
    """컬럼 선택 테스트"""

    def test_select_and_remember(self, session):
        session.set_visible_columns(["name", " power ", "NAME"])
        assert session.visible_columns() == ["NAME", "POWER"]
        session.execute_command(":host")
        assert "TAGS" in session.visible_columns()
        session.execute_command(":vm")
        assert session.visible_columns() == ["NAME", "POWER"]

    def test_reset(self, session):
        session.set_visible_columns(["NAME"])
        session.reset_visible_columns()
        assert session.visible_columns() == session.available_columns()

    @pytest.mark.parametrize("columns", [[], ["  "], ["NAME", "COLOR"]])
    def test_invalid_selection(self, session, columns):
        with pytest.raises(InvalidColumnsError):
            session.set_visible_columns(columns)
        assert session.visible_columns() == session.available_columns()

    def test_filter_reapplied(self, rich_session):
        rich_session.apply_filter_expression("esxi")
        assert rich_session.current_view().ids == ["vm-a", "prod-db"]
        rich_session.set_visible_columns(["NAME"])
        assert rich_session.current_view().ids == []
        assert rich_session.filter_text == "esxi"

    def test_sort_hotkeys_follow_columns(self, session):
        session.set_visible_columns(["NAME"])
        with pytest.raises(UnsupportedHotKeyError):
            session.handle_key("P")


# =============================================================================
# 액션
# =============================================================================


class TestApplyAction:
    """액션 실행 테스트"""

    def test_selected_row_target(self, session, executor):
        session.apply_action("power-on", executor)
        assert executor.calls == [(ResourceKind.VM, "power-on", ["vm-a"])]
        assert statuses(session) == ["queued", "running", "success"]
        assert session.action_transitions()[0].timestamp == "2026-02-14T12:00:00Z"

    def test_audit_record(self, session, executor):
        session.apply_action("POWER-ON", executor)
        audit = session.action_audits()[0]
        assert audit.actor == "operator"
        assert audit.action == "power-on"
        assert audit.targets == ("vm-a",)
        assert audit.outcome == "success"
        assert audit.failed_ids == ()

    def test_marked_rows_in_view_order(self, session, executor):
        session.handle_key("J")
        session.handle_key("SPACE")
        session.handle_key("K")
        session.handle_key("SPACE")
        session.apply_action("suspend", executor)
        assert executor.calls[0][2] == ["vm-a", "vm-b"]

    def test_read_only(self, session, executor):
        session.read_only = True
        with pytest.raises(ReadOnlyError):
            session.apply_action("power-on", executor)
        assert executor.calls == []
        assert session.action_transitions() == []

    def test_action_not_in_view(self, session, executor):
        with pytest.raises(InvalidActionError):
            session.apply_action("rescan", executor)

    def test_no_rows(self, session, executor):
        session.apply_filter("nothing-matches")
        with pytest.raises(InvalidActionError, match="no selected rows"):
            session.apply_action("power-on", executor)

    def test_migrate(self, session, executor):
        session.apply_action("migrate host=esxi-02", executor)
        assert executor.calls == [(ResourceKind.VM, "migrate host=esxi-02", ["vm-a"])]
        assert session.last_action.action == "migrate host=esxi-02"
        assert session.action_transitions()[0].action == "migrate"

    def test_failure_is_recorded_and_raised(self, session, make_executor):
        executor = make_executor(errors=[ActionExecutionError("denied", ErrorCategory.ACCESS_DENIED)])
        with pytest.raises(ActionExecutionError):
            session.apply_action("power-on", executor)
        assert statuses(session) == ["queued", "running", "failure"]
        audit = session.action_audits()[0]
        assert audit.outcome == "failure"
        assert audit.failed_ids == ("vm-a",)


class TestConfirmation:
    """파괴적 액션 확인 테스트"""

    def test_two_call_confirmation(self, session, executor):
        with pytest.raises(ConfirmationRequiredError) as exc_info:
            session.apply_action("power-off", executor)
        assert exc_info.value.action == "power-off"
        assert exc_info.value.targets == ["vm-a"]
        assert executor.calls == []
        assert session.pending_action is not None

        session.apply_action("power-off", executor)
        assert executor.calls == [(ResourceKind.VM, "power-off", ["vm-a"])]
        assert session.pending_action is None

    def test_different_targets_need_new_confirmation(self, session, executor):
        with pytest.raises(ConfirmationRequiredError):
            session.apply_action("power-off", executor)
        session.handle_key("J")
        with pytest.raises(ConfirmationRequiredError):
            session.apply_action("power-off", executor)
        assert executor.calls == []

    def test_deny(self, session, executor):
        with pytest.raises(ConfirmationRequiredError):
            session.apply_action("power-off", executor)
        session.deny_pending_action()
        with pytest.raises(ConfirmationRequiredError):
            session.apply_action("power-off", executor)

    def test_proposal_flow(self, session, executor):
        proposal = session.propose_action("power-off")
        assert proposal.destructive is True
        assert proposal.request.ids == ("vm-a",)
        session.confirm_action(proposal, executor)
        assert executor.calls == [(ResourceKind.VM, "power-off", ["vm-a"])]
        with pytest.raises(InvalidActionError, match="stale proposal"):
            session.confirm_action(proposal, executor)

    def test_proposal_replaced(self, session, executor):
        first = session.propose_action("power-on")
        session.propose_action("suspend")
        with pytest.raises(InvalidActionError):
            session.confirm_action(first, executor)

    def test_proposal_invalidated_by_view_switch(self, session, executor):
        proposal = session.propose_action("power-on")
        session.execute_command(":host")
        with pytest.raises(InvalidActionError):
            session.confirm_action(proposal, executor)

    def test_proposal_after_read_only(self, session, executor):
        proposal = session.propose_action("power-on")
        session.read_only = True
        with pytest.raises(ReadOnlyError):
            session.confirm_action(proposal, executor)
        assert executor.calls == []


class TestRetryAndTimeout:
    """재시도/타임아웃 정책 테스트"""

    def test_retry_limit(self, session, make_executor, sleeps):
        executor = make_executor(errors=[ActionExecutionError("busy", ErrorCategory.THROTTLING), None])
        session.set_action_retry_limit("power-on", 2)
        session.apply_action("power-on", executor)
        assert len(executor.calls) == 2
        assert sleeps == []
        assert statuses(session)[-1] == "success"

    def test_no_retry_by_default(self, session, make_executor):
        executor = make_executor(errors=[ActionExecutionError("busy", ErrorCategory.THROTTLING)])
        with pytest.raises(ActionExecutionError):
            session.apply_action("power-on", executor)
        assert len(executor.calls) == 1

    def test_retry_limit_removed(self, session, make_executor):
        executor = make_executor(errors=[ActionExecutionError("busy", ErrorCategory.THROTTLING)])
        session.set_action_retry_limit("power-on", 3)
        session.set_action_retry_limit("power-on", 0)
        with pytest.raises(ActionExecutionError):
            session.apply_action("power-on", executor)
        assert len(executor.calls) == 1

    def test_backoff_sleep(self, catalog, clock, sleeps, make_executor):
        config = RetryConfig(max_retries=1, base_delay=0.5)
        session = Session(catalog, clock=clock, sleep=sleeps.append, retry_config=config)
        executor = make_executor(errors=[ActionExecutionError("net", ErrorCategory.NETWORK), None])
        session.apply_action("power-on", executor)
        assert sleeps == [0.5]

    def test_timeout(self, catalog, make_executor, make_clock):
        session = Session(catalog, clock=make_clock(step=timedelta(seconds=2)))
        session.set_action_timeout("power-on", 1)
        executor = make_executor()
        with pytest.raises(ActionTimeoutError):
            session.apply_action("power-on", executor)
        assert len(executor.calls) == 1
        assert statuses(session) == ["queued", "running", "failure"]

    def test_timeout_removed(self, catalog, make_executor, make_clock):
        session = Session(catalog, clock=make_clock(step=timedelta(seconds=2)))
        session.set_action_timeout("power-on", 1)
        session.set_action_timeout("power-on", 0)
        session.apply_action("power-on", make_executor())
        assert statuses(session)[-1] == "success"


class TestHostMaintenance:
    """호스트 유지보수 후처리 테스트"""

    def test_enter_maintenance(self, session, executor):
        session.execute_command(":host")
        session.apply_action("enter-maintenance", executor)

        column = session.visible_columns().index("CONNECTION")
        assert session.current_view().rows[0].cells[column] == "maintenance"
        assert session.current_view().rows[1].cells[column] == "connected"
        assert session.catalog.find_host("esxi-01").connection_state == "maintenance"
        assert statuses(session) == ["queued", "running", "success", "maintenance-enabled"]

    def test_state_survives_view_reload(self, session, executor):
        session.execute_command(":host")
        session.apply_action("enter-maintenance", executor)
        session.execute_command(":vm")
        session.execute_command(":host")
        column = session.visible_columns().index("CONNECTION")
        assert session.current_view().rows[0].cells[column] == "maintenance"

    def test_exit_maintenance(self, session, executor):
        session.execute_command(":host")
        session.apply_action("exit-maintenance", executor)
        assert statuses(session)[-1] == "maintenance-disabled"


class TestPreviewAndCancel:
    def test_preview(self, session):
        preview = session.preview_action("Power-Off")
        assert preview.action == "power-off"
        assert preview.target_count == 1
        assert preview.target_ids == ("vm-a",)
        assert preview.side_effects == ("workloads stop", "guest sessions terminate")

    def test_preview_invalid(self, session):
        with pytest.raises(InvalidActionError):
            session.preview_action("rescan")

    def test_cancel_without_action(self, session, canceler):
        with pytest.raises(InvalidActionError, match="no pending action"):
            session.cancel_last_action(canceler)

    def test_cancel_without_canceler(self, session, executor):
        session.apply_action("power-on", executor)
        with pytest.raises(InvalidActionError, match="canceler unavailable"):
            session.cancel_last_action(None)

    def test_cancel(self, session, executor, canceler):
        session.apply_action("power-on", executor)
        session.execute_command(":host")
        session.cancel_last_action(canceler)
        assert canceler.calls == [(ResourceKind.VM, "power-on", ["vm-a"])]
        last = session.action_transitions()[-1]
        assert (last.status, last.resource) == ("cancelled", ResourceKind.VM)


# =============================================================================
# 상세 / 경로 / 렌더링
# =============================================================================


class TestDetails:
    def test_vm_details(self, rich_session):
        details = rich_session.selected_resource_details()
        fields = {field.key: field.value for field in details.fields}
        assert details.title == "VM DETAILS"
        assert fields["NAME"] == "vm-a"
        assert fields["POWER_STATE"] == "on"
        assert fields["COMMENTS"] == "web tier"
        assert fields["DESCRIPTION"] == "-"
        assert fields["SNAPSHOT_COUNT"] == "1"
        assert fields["SNAPSHOT_1"] == "snap-1 @ 2026-01-10T08:00:00Z"

    def test_other_kind_details(self, rich_session):
        rich_session.execute_command(":host")
        details = rich_session.selected_resource_details()
        assert details.title == "HOST DETAILS"
        assert details.fields[0].key == "NAME"
        assert details.fields[1].value == "env=prod,gpu"

    def test_no_selection(self, session):
        session.execute_command(":snapshot")
        with pytest.raises(InvalidActionError):
            session.selected_resource_details()


class TestBreadcrumbAndRender:
    def test_breadcrumb(self, rich_session):
        assert rich_session.breadcrumb_path() == "home > dc-1 > cluster-east > esxi-01 > vm-a"
        rich_session.execute_command(":lun")
        assert rich_session.breadcrumb_path() == "home > lun"

    def test_render_header(self, session):
        assert session.render().startswith("HyperSphere :: vm | Mode: RW | Sort: - | Marks[0]\n")
        session.read_only = True
        session.handle_key("SPACE")
        session.handle_key("N")
        assert session.render().startswith("HyperSphere :: vm | Mode: RO | Sort: NAME↑ | Marks[1]\n")

    def test_render_empty_view(self, session):
        session.execute_command(":snapshot")
        assert session.render().endswith("No resources found.\n")
