"""Unit tests for rule 3 (SuccessToastRule)."""

import pytest

from ux_commit_check.domain.request_calls import RequestCallClassifier
from ux_commit_check.domain.rules.success_toast import SuccessToastRule

DELETE_WITHOUT_TOAST = """
import request from './request';

async function handleDelete(id) {
  await request.delete(`/users/${id}`);
  reload();
}

function label() {
  return 'x';
}
"""


def _rule(config) -> SuccessToastRule:
    return SuccessToastRule(config.rule(3), RequestCallClassifier(config.rule(1).keywords("requestMethods")))


def _diff_adding_line(number: int, content: str) -> str:
    return (
        "diff --git a/src/users.js b/src/users.js\n"
        "index 1111111..2222222 100644\n"
        "--- a/src/users.js\n"
        "+++ b/src/users.js\n"
        f"@@ -{number},1 +{number},1 @@\n"
        "-old\n"
        f"+{content}\n"
    )


class TestSuccessToastRule:
    def test_delete_without_toast_is_reported(self, config, make_unit, find_line) -> None:
        unit = make_unit("src/users.js", DELETE_WITHOUT_TOAST)
        violations = _rule(config).evaluate("src/users.js", unit, "")
        assert len(violations) == 1
        violation = violations[0]
        assert (violation.rule, violation.symbol) == (3, "missing-success-toast")
        assert violation.line == find_line(DELETE_WITHOUT_TOAST, "await request.delete")
        assert violation.message.startswith("DELETE request 'request.delete'")

    def test_toast_after_await(self, config, make_unit) -> None:
        unit = make_unit("src/users.js", DELETE_WITHOUT_TOAST.replace("reload();", "message.success('删除成功');"))
        assert _rule(config).evaluate("src/users.js", unit, "") == []

    def test_toast_in_then_callback(self, config, make_unit) -> None:
        source = """
        function save(data) {
          request.post('/users', data).then(() => {
            message.success('保存成功');
          });
        }
        """
        unit = make_unit("src/users.js", source)
        assert _rule(config).evaluate("src/users.js", unit, "") == []

    def test_toast_in_catch_does_not_count(self, config, make_unit) -> None:
        source = """
        function save(data) {
          request.post('/users', data).catch(() => {
            message.success('never mind');
          });
        }
        """
        unit = make_unit("src/users.js", source)
        assert len(_rule(config).evaluate("src/users.js", unit, "")) == 1

    def test_success_callback_option(self, config, make_unit) -> None:
        source = """
        function save(data) {
          this.props.dispatch({
            type: 'user/saveUser',
            payload: data,
            callback: () => this.$message.success('ok'),
          });
        }
        """
        unit = make_unit("src/users.js", source)
        assert _rule(config).evaluate("src/users.js", unit, "") == []

    def test_read_requests_are_ignored(self, config, make_unit) -> None:
        source = "async function load() {\n  const res = await request.get('/users');\n  return res;\n}\n"
        unit = make_unit("src/users.js", source)
        assert _rule(config).evaluate("src/users.js", unit, "") == []

    def test_options_object_method(self, config, make_unit) -> None:
        source = "async function save(body) {\n  await fetch('/api/users', { method: 'POST', body });\n}\n"
        unit = make_unit("src/users.js", source)
        violations = _rule(config).evaluate("src/users.js", unit, "")
        assert [v.message.split()[0] for v in violations] == ["POST"]

    def test_batch_operations_are_whitelisted(self, config, make_unit) -> None:
        unit = make_unit("src/users.js", DELETE_WITHOUT_TOAST.replace("handleDelete", "handleBatchDelete"))
        assert _rule(config).evaluate("src/users.js", unit, "") == []

    def test_custom_success_method(self, config_with, make_unit) -> None:
        configuration = config_with(rule3={"customKeywords": {"successMethods": ["notify.ok"]}})
        unit = make_unit("src/users.js", DELETE_WITHOUT_TOAST.replace("reload();", "notify.ok();"))
        assert _rule(configuration).evaluate("src/users.js", unit, "") == []

    @pytest.mark.parametrize(("added_line", "reported"), [(4, True), (9, False)])
    def test_modified_file_checks_only_added_calls(self, config, make_unit, added_line: int, reported: bool) -> None:
        diff = _diff_adding_line(added_line, "changed")
        unit = make_unit("src/users.js", DELETE_WITHOUT_TOAST, diff)
        violations = _rule(config).evaluate("src/users.js", unit, diff)
        assert bool(violations) is reported

    def test_request_inside_comment_is_ignored(self, config, make_unit) -> None:
        source = "function f() {\n  // request.post('/x');\n  /* api.delete(1); */\n}\n"
        unit = make_unit("src/users.js", source)
        assert _rule(config).evaluate("src/users.js", unit, "") == []

    def test_disabled_rule(self, config_with, make_unit) -> None:
        unit = make_unit("src/users.js", DELETE_WITHOUT_TOAST)
        assert _rule(config_with(rule3={"enabled": False})).evaluate("src/users.js", unit, "") is None
